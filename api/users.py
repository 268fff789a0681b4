"""
Admin endpoints over user records:
- PUT  /users/<user_id>/role             assign a role (admin only)
- POST /users/<user_id>/sessions/revoke  log a user out everywhere (admin only)
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from api.context import get_context
from models.schemas.user import RoleUpdateSchema, UserOutSchema
from models.user import Role
from utils.decorators import roles_required

bp = Blueprint("users", __name__)

role_update_schema = RoleUpdateSchema()
user_out_schema = UserOutSchema()


@bp.put("/users/<user_id>/role")
@roles_required([Role.ADMIN])
def set_role(user_id: str):
    """
    Assign a role to a user. - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            role: { type: string, enum: [user, admin] }
    responses:
      200:
        description: OK
      403:
        description: Insufficient role
      404:
        description: User not found
    """
    payload = request.get_json(silent=True) or {}
    data = role_update_schema.load(payload)
    user = get_context().identities.set_role(user_id, Role(data["role"]))
    if user is None:
        abort(404, description="User not found")
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.post("/users/<user_id>/sessions/revoke")
@roles_required([Role.ADMIN])
def revoke_sessions(user_id: str):
    """
    Revoke every refresh token of a user. - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200:
        description: Number of sessions revoked
      403:
        description: Insufficient role
      404:
        description: User not found
    """
    ctx = get_context()
    if ctx.identities.find_by_id(user_id) is None:
        abort(404, description="User not found")
    revoked = ctx.sessions.logout_everywhere(user_id)
    return jsonify({"revoked": revoked}), 200
