"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- POST /auth/logout-all
- GET  /auth/me

The implementation:
- Uses argon2 for password hashing (utils.security.CredentialVerifier)
- Issues short-lived access tokens (JWT, HS256) and long-lived opaque refresh secrets
- Stores refresh secrets server side (RefreshToken model) so they rotate exactly once
  and can be revoked
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, abort

from api.context import get_context
from models.schemas.user import (
    RefreshSchema,
    TokenPairOutSchema,
    UserCreateSchema,
    UserLoginSchema,
    UserOutSchema,
)
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()
refresh_schema = RefreshSchema()
token_pair_schema = TokenPairOutSchema()


@bp.post("/register")
def register():
    """
    register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    ctx = get_context()
    if ctx.identities.email_exists(data["email"]):
        abort(409, description="Email already registered")

    user = ctx.identities.create_user(
        email=data["email"],
        password_hash=ctx.verifier.hash(data["password"]),
        name=data["name"],
    )
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid email or password
      503:
        description: Store unavailable, safe to retry
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)
    pair = get_context().sessions.login(data["email"], data["password"])
    return jsonify(token_pair_schema.dump(pair._asdict())), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain new access and refresh tokens (rotation).
    The presented refresh token is spent whether or not the response arrives.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns a new token pair)
      401:
        description: Invalid or expired token
      503:
        description: Store unavailable; a retry may report 401 if the first attempt committed
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_schema.load(payload)
    pair = get_context().sessions.refresh(data["refresh_token"])
    return jsonify(token_pair_schema.dump(pair._asdict())), 200


@bp.post("/logout")
@jwt_required()
def logout():
    """
    logout: revokes the refresh token of the current session
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Unauthorized
    """
    get_context().sessions.logout(g.current_claims)
    return ("", 204)


@bp.post("/logout-all")
@jwt_required()
def logout_all():
    """
    logout everywhere: revokes every refresh token of the current user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Number of sessions revoked
      401:
        description: Unauthorized
    """
    revoked = get_context().sessions.logout_everywhere(g.current_user_id)
    return jsonify({"revoked": revoked}), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = get_context().identities.find_by_id(g.current_user_id)
    if user is None:
        abort(404, description="User not found")
    return jsonify({"data": user_out_schema.dump(user)}), 200
