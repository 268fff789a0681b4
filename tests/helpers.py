import base64
import json

SIGNING_SECRET = "test-signing-secret-0123456789abcdef0123456789"
USER_EMAIL = "alice@example.com"
USER_PASSWORD = "correct horse battery"
ADMIN_EMAIL = "root@example.com"
ADMIN_PASSWORD = "admin password 123"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def b64url(obj) -> str:
    raw = json.dumps(obj, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def unsigned_token(payload: dict) -> str:
    """A JWS that declares alg=none and carries no signature."""
    return f"{b64url({'alg': 'none', 'typ': 'JWT'})}.{b64url(payload)}."


def flip_signature_char(token: str) -> str:
    header, payload, signature = token.split(".")
    # the first base64 char maps to 6 whole bits, so any change alters the MAC
    replacement = "A" if signature[0] != "A" else "B"
    return f"{header}.{payload}.{replacement}{signature[1:]}"


class CountingHasher:
    """Wraps a PasswordHasher and counts verify() calls."""

    def __init__(self, inner):
        self.inner = inner
        self.verifications = 0

    def hash(self, plaintext):
        return self.inner.hash(plaintext)

    def verify(self, password_hash, plaintext):
        self.verifications += 1
        return self.inner.verify(password_hash, plaintext)
