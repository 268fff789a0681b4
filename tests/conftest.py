import pytest

from api import create_app
from api.context import EXTENSION_KEY
from models.db_storage import DBStorage
from models.identity_store import IdentityStore
from models.refresh_token_store import RefreshTokenStore
from models.user import Role

from helpers import ADMIN_EMAIL, ADMIN_PASSWORD, USER_EMAIL, USER_PASSWORD


@pytest.fixture
def app(tmp_path):
    # file-backed SQLite: an in-memory database is per-thread
    app = create_app("test", overrides={"DATABASE_URL": f"sqlite:///{tmp_path / 'sessions.db'}"})
    yield app
    app.extensions[EXTENSION_KEY].storage.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def user(ctx):
    return ctx.identities.create_user(
        email=USER_EMAIL, password_hash=ctx.verifier.hash(USER_PASSWORD), name="Alice"
    )


@pytest.fixture
def admin(ctx):
    return ctx.identities.create_user(
        email=ADMIN_EMAIL, password_hash=ctx.verifier.hash(ADMIN_PASSWORD), name="Root", role=Role.ADMIN
    )


@pytest.fixture
def storage(tmp_path):
    storage = DBStorage(f"sqlite:///{tmp_path / 'store.db'}", timeout=5)
    storage.reload()
    yield storage
    storage.dispose()


@pytest.fixture
def store(storage):
    return RefreshTokenStore(storage)


@pytest.fixture
def subject_id(storage):
    # refresh_tokens.user_id is a foreign key; give the rows a real owner
    identities = IdentityStore(storage)
    return identities.create_user(email="owner@example.com", password_hash="x").id
