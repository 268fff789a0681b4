"""
Process-lifetime application context.

Built once by create_app from the loaded config and stored on
app.extensions; request handlers reach it through get_context(). It is
never rebuilt or mutated while the app is serving.
"""
from __future__ import annotations

from flask import current_app

from models.db_storage import DBStorage
from models.identity_store import IdentityStore
from models.product_store import ProductStore
from models.refresh_token_store import RefreshTokenStore
from services.session_service import SessionService
from utils.security import CredentialVerifier
from utils.tokens import AccessTokenCodec

EXTENSION_KEY = "session_context"


class AppContext:
    __slots__ = ("storage", "identities", "verifier", "codec", "refresh_tokens", "sessions", "products")

    def __init__(self, storage: DBStorage, identities: IdentityStore, verifier: CredentialVerifier,
                 codec: AccessTokenCodec, refresh_tokens: RefreshTokenStore, sessions: SessionService,
                 products: ProductStore):
        self.storage = storage
        self.identities = identities
        self.verifier = verifier
        self.codec = codec
        self.refresh_tokens = refresh_tokens
        self.sessions = sessions
        self.products = products

    @classmethod
    def from_config(cls, config) -> "AppContext":
        storage = DBStorage(
            config["DATABASE_URL"],
            timeout=float(config["STORE_TIMEOUT_SECONDS"]),
            echo=bool(config.get("SQL_ECHO")),
        )
        storage.reload()
        identities = IdentityStore(storage)
        verifier = CredentialVerifier()
        codec = AccessTokenCodec(config["JWT_SECRET"], config["ACCESS_TOKEN_TTL"])
        refresh_tokens = RefreshTokenStore(storage)
        sessions = SessionService(identities, verifier, codec, refresh_tokens, config["REFRESH_TOKEN_TTL"])
        products = ProductStore(storage)
        return cls(storage, identities, verifier, codec, refresh_tokens, sessions, products)


def get_context() -> AppContext:
    return current_app.extensions[EXTENSION_KEY]
