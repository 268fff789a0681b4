from marshmallow import Schema, ValidationError, fields, validate, validates_schema

# Field rules shared by create and update
PRODUCT_RULES = {
    "name": [validate.Length(min=2, max=80, error="Name must be between 2 and 80 characters.")],
    "description": [validate.Length(max=1000, error="Description must be at most 1000 characters.")],
    "price_cents": [validate.Range(min=0, error="price_cents must be >= 0.")],
    "category": [validate.Length(min=1, max=80, error="Category is required.")],
    "image_url": [validate.URL(error="Not a valid URL.")],
}


class ProductCreateSchema(Schema):
    name = fields.String(required=True, validate=PRODUCT_RULES["name"])
    description = fields.String(load_default="", validate=PRODUCT_RULES["description"])
    price_cents = fields.Integer(required=True, strict=True, validate=PRODUCT_RULES["price_cents"])
    category = fields.String(required=True, validate=PRODUCT_RULES["category"])
    image_url = fields.String(allow_none=True, validate=PRODUCT_RULES["image_url"])
    is_available = fields.Boolean(load_default=True)


class ProductUpdateSchema(Schema):
    # All optional, but validate if present
    name = fields.String(validate=PRODUCT_RULES["name"])
    description = fields.String(validate=PRODUCT_RULES["description"])
    price_cents = fields.Integer(strict=True, validate=PRODUCT_RULES["price_cents"])
    category = fields.String(validate=PRODUCT_RULES["category"])
    image_url = fields.String(allow_none=True, validate=PRODUCT_RULES["image_url"])
    is_available = fields.Boolean()

    @validates_schema
    def _require_a_field(self, data, **kwargs):
        if not data:
            raise ValidationError("No fields to update.")


class ProductOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String()
    price_cents = fields.Integer()
    category = fields.String()
    image_url = fields.String(allow_none=True)
    is_available = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
