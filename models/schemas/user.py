from marshmallow import Schema, fields, pre_load, validate

from models.user import Role


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


# Field rules per input type: {field: [validator(error=message), ...]}.
# Schemas below take their validators from these tables and nowhere else.
REGISTER_RULES = {
    "name": [validate.Length(min=2, max=100, error="Name must be between 2 and 100 characters.")],
    "email": [validate.Email(error="Not a valid email address.")],
    "password": [validate.Length(min=8, max=128, error="Password must be between 8 and 128 characters.")],
}

LOGIN_RULES = {
    "email": [validate.Length(min=1, max=255, error="Email is required.")],
    "password": [validate.Length(min=1, max=128, error="Password is required.")],
}

REFRESH_RULES = {
    "refresh_token": [validate.Length(min=1, max=512, error="refresh_token is required.")],
}

ROLE_RULES = {
    "role": [validate.OneOf([r.value for r in Role], error="Role must be one of: {choices}.")],
}


class UserCreateSchema(Schema):
    name = fields.String(required=True, validate=REGISTER_RULES["name"])
    email = fields.String(required=True, validate=REGISTER_RULES["email"])
    password = fields.String(required=True, load_only=True, validate=REGISTER_RULES["password"])

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class UserLoginSchema(Schema):
    email = fields.String(required=True, validate=LOGIN_RULES["email"])
    password = fields.String(required=True, load_only=True, validate=LOGIN_RULES["password"])


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True, load_only=True, validate=REFRESH_RULES["refresh_token"])


class RoleUpdateSchema(Schema):
    role = fields.String(required=True, validate=ROLE_RULES["role"])


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    name = fields.String(allow_none=True)
    email = fields.String(allow_none=False)
    role = fields.Method("get_role")
    created_at = fields.DateTime()

    def get_role(self, obj):
        role = getattr(obj, "role", None)
        return getattr(role, "value", role)


class TokenPairOutSchema(Schema):
    access_token = fields.String()
    access_token_expires_in = fields.Integer()
    refresh_token = fields.String(attribute="refresh_secret")
    token_type = fields.String()
