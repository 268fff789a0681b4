from __future__ import annotations
from functools import wraps
from flask import request, g

from api.context import get_context
from models.user import Role
from utils.errors import Forbidden, InvalidOrExpiredToken


def jwt_required():
    """Require a valid access token; exposes the decoded claims on flask.g."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            scheme, _, token = auth.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                raise InvalidOrExpiredToken("missing or invalid Authorization header")
            claims = get_context().sessions.authenticate(token.strip())
            g.current_claims = claims
            g.current_user_id = claims.subject_id
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(required_roles: list[Role | str]):
    """
    Capability check over the role set {user, admin}.
    The role comes from the current user record, not from the token, so a
    demotion takes effect on the next request.
    """
    req = {Role(r) for r in (required_roles or [])}

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            user = get_context().identities.find_by_id(g.current_user_id)
            if user is None:
                raise InvalidOrExpiredToken("user not found")
            g.current_user = user
            if Role(user.role) not in req:
                raise Forbidden(f"user {user.id} lacks {sorted(r.value for r in req)}")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
