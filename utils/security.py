"""
security helpers:
- Argon2 password hashing via argon2-cffi (CredentialVerifier)
- refresh secret generation via the secrets module
"""
from __future__ import annotations

import hashlib
import secrets

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

# Fixed argon2id cost (RFC 9106 low-memory profile). One verification takes
# tens of milliseconds on commodity hardware.
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # KiB
ARGON2_PARALLELISM = 4

# 32 random bytes -> 43 url-safe characters
REFRESH_SECRET_BYTES = 32


class CredentialVerifier:
    """One-way password hashing and verification."""

    def __init__(self):
        self._ph = PasswordHasher(
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST,
            parallelism=ARGON2_PARALLELISM,
            type=Type.ID,
        )
        self._dummy_hash: str | None = None

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password using Argon2."""
        return self._ph.hash(plaintext)

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """Verify a plaintext password against a stored hash.

        Returns False on mismatch, on a malformed hash and on empty input.
        Empty input still costs one argon2 verification.
        """
        if not password_hash or not plaintext:
            self.verify_dummy(plaintext)
            return False
        try:
            return self._ph.verify(password_hash, plaintext)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def verify_dummy(self, plaintext: str) -> bool:
        """Spend one verification on a throwaway hash (unknown account path)."""
        if self._dummy_hash is None:
            self._dummy_hash = self._ph.hash(secrets.token_urlsafe(16))
        self.verify(self._dummy_hash, plaintext or "x")
        return False


def generate_refresh_secret() -> str:
    """Generate an opaque refresh secret (256 bits, url-safe base64)."""
    return secrets.token_urlsafe(REFRESH_SECRET_BYTES)


def digest_secret(secret: str) -> str:
    """SHA-256 hex digest of a refresh secret; what the database stores."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()
