"""
Error taxonomy for the session core.

Every failure that can leave the core is one of these. The HTTP layer
(api.errors) renders them into the uniform error envelope using the
``code``, ``message`` and ``status`` class attributes.
"""
from __future__ import annotations


class SessionError(Exception):
    """Base class: carries a stable code, a fixed public message and an HTTP status."""

    code = "INTERNAL_ERROR"
    message = "An unexpected error occurred"
    status = 500
    retryable = False

    def __init__(self, detail: str | None = None):
        # detail is for logs only; the public message never changes
        super().__init__(detail or self.message)
        self.detail = detail


class AuthenticationError(SessionError):
    code = "UNAUTHORIZED"
    message = "Authentication failed"
    status = 401


class InvalidCredentials(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class InvalidOrExpiredToken(AuthenticationError):
    code = "INVALID_OR_EXPIRED_TOKEN"
    message = "Invalid or expired token"


# Access token decode failures, in validation order.
class TokenError(AuthenticationError):
    code = "INVALID_TOKEN"
    message = "Invalid token"


class MalformedToken(TokenError):
    code = "MALFORMED_TOKEN"


class AlgorithmRejected(TokenError):
    code = "ALGORITHM_REJECTED"
    message = "Token signing algorithm not accepted"


class SignatureInvalid(TokenError):
    code = "SIGNATURE_INVALID"


class TokenExpired(TokenError):
    code = "TOKEN_EXPIRED"


class Forbidden(SessionError):
    code = "FORBIDDEN"
    message = "Insufficient role"
    status = 403


class StoreUnavailable(SessionError):
    """Transient persistence failure. The whole operation may be retried."""

    code = "STORE_UNAVAILABLE"
    message = "Service temporarily unavailable, retry later"
    status = 503
    retryable = True


class InternalError(SessionError):
    pass
