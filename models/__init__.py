"""Persistence layer: SQLAlchemy models and the stores built on DBStorage."""
from models.base_model import Base
from models.db_storage import DBStorage
from models.identity_store import Credential, IdentityStore
from models.product import Product
from models.product_store import ProductStore
from models.refresh_token import RefreshToken
from models.refresh_token_store import RefreshTokenRecord, RefreshTokenStore
from models.user import Role, User

__all__ = [
    "Base",
    "Credential",
    "DBStorage",
    "IdentityStore",
    "Product",
    "ProductStore",
    "RefreshToken",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "Role",
    "User",
]
