"""
Access token codec (PyJWT).

Tokens are compact JWS strings signed with HS256 and a symmetric secret.
The algorithm is pinned: decode() refuses any header that declares a
different one, "none" included.
"""
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

import jwt
from jwt.utils import base64url_decode

from utils.errors import (
    AlgorithmRejected,
    MalformedToken,
    SignatureInvalid,
    TokenExpired,
)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class AccessTokenClaims(NamedTuple):
    subject_id: str
    email: Optional[str]
    issued_at: datetime
    expires_at: datetime
    session_id: Optional[str] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_structure(token: str) -> dict:
    """Return the header once both header and payload are base64url JSON objects."""
    try:
        header = jwt.get_unverified_header(token)
        payload = json.loads(base64url_decode(token.split(".")[1].encode("ascii")))
    except (jwt.DecodeError, ValueError) as exc:
        raise MalformedToken(str(exc)) from exc
    if not isinstance(payload, dict):
        raise MalformedToken("payload is not a JSON object")
    return header


class AccessTokenCodec:
    """Stateless encode/decode of short-lived signed claims."""

    def __init__(self, secret: str | bytes, ttl: timedelta):
        if not secret:
            raise ValueError("signing secret must not be empty")
        self._secret = secret
        self.ttl = ttl

    def access_ttl_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    def encode(
        self,
        subject_id: str,
        email: str | None,
        ttl: timedelta | None = None,
        session_id: str | None = None,
    ) -> str:
        now = _now()
        exp = now + (self.ttl if ttl is None else ttl)
        payload = {
            "sub": str(subject_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        if session_id:
            payload["sid"] = session_id
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> AccessTokenClaims:
        """
        Validate and decode a token. Checks run in a fixed order:
        structure, algorithm, signature, expiry. No leeway.
        """
        if not isinstance(token, str) or not token:
            raise MalformedToken("empty token")
        header = _parse_structure(token)

        if header.get("alg") != ALGORITHM:
            raise AlgorithmRejected(f"alg={header.get('alg')!r}")

        try:
            decoded = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
        # InvalidSignatureError subclasses DecodeError; catch it first
        except jwt.InvalidSignatureError as exc:
            raise SignatureInvalid(str(exc)) from exc
        except jwt.InvalidAlgorithmError as exc:
            raise AlgorithmRejected(str(exc)) from exc
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken(str(exc)) from exc

        return AccessTokenClaims(
            subject_id=decoded["sub"],
            email=decoded.get("email"),
            issued_at=datetime.fromtimestamp(decoded["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc),
            session_id=decoded.get("sid"),
        )
