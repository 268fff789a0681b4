"""
Catalog blueprint:
- GET    /products               public, paginated
- GET    /products/<product_id>  public
- POST   /products               admin only
- PUT    /products/<product_id>  admin only (partial update)
- DELETE /products/<product_id>  admin only
"""
from __future__ import annotations

from typing import Tuple

from flask import Blueprint, request, jsonify, abort

from api.context import get_context
from models.schemas.product import ProductCreateSchema, ProductOutSchema, ProductUpdateSchema
from models.user import Role
from utils.decorators import roles_required

bp = Blueprint("products", __name__)

product_create_schema = ProductCreateSchema()
product_update_schema = ProductUpdateSchema()
product_out_schema = ProductOutSchema()
products_out_schema = ProductOutSchema(many=True)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(DEFAULT_LIMIT)))
    except ValueError:
        abort(400, description="page and limit must be integers")
    return max(page, 1), min(max(limit, 1), MAX_LIMIT)


@bp.get("/products")
def list_products():
    """
    List products, newest first
    ---
    tags:
      - Products
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
    responses:
      200:
        description: One page of products
    """
    page, limit = parse_pagination()
    rows, total = get_context().products.list(page, limit)
    return jsonify(
        {
            "data": products_out_schema.dump(rows),
            "meta": {"page": page, "limit": limit, "total": total},
        }
    )


@bp.get("/products/<product_id>")
def get_product(product_id: str):
    """
    Get a single product by id
    ---
    tags:
      - Products
    parameters:
      - in: path
        name: product_id
        type: string
        required: true
    responses:
      200:
        description: Product found
      404:
        description: Not found
    """
    product = get_context().products.get(product_id)
    if product is None:
        abort(404)
    return jsonify({"data": product_out_schema.dump(product)})


@bp.post("/products")
@roles_required([Role.ADMIN])
def create_product():
    """
    Create a product - admin
    ---
    tags:
      - Products
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, minLength: 2, maxLength: 80 }
            description: { type: string, maxLength: 1000 }
            price_cents: { type: integer, minimum: 0 }
            category: { type: string }
            image_url: { type: string, format: uri }
            is_available: { type: boolean, default: true }
    responses:
      201:
        description: Created
      403:
        description: Insufficient role
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = product_create_schema.load(payload)
    product = get_context().products.create(**data)
    return jsonify({"data": product_out_schema.dump(product)}), 201


@bp.put("/products/<product_id>")
@roles_required([Role.ADMIN])
def update_product(product_id: str):
    """
    Update a product (partial) - admin
    ---
    tags:
      - Products
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: product_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200:
        description: Updated
      404:
        description: Not found
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = product_update_schema.load(payload)
    product = get_context().products.update(product_id, data)
    if product is None:
        abort(404)
    return jsonify({"data": product_out_schema.dump(product)})


@bp.delete("/products/<product_id>")
@roles_required([Role.ADMIN])
def delete_product(product_id: str):
    """
    Delete a product - admin
    ---
    tags:
      - Products
    security:
      - Bearer: []
    parameters:
      - in: path
        name: product_id
        type: string
        required: true
    responses:
      200:
        description: Deleted
      404:
        description: Not found
    """
    if not get_context().products.delete(product_id):
        abort(404)
    return jsonify({"message": "product deleted"})
