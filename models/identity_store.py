"""
Identity store: the users table as seen by the session core.

The core only ever reads credentials through find_credential_by_email and
find_by_id; create_user and set_role back the registration and admin
endpoints.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from sqlalchemy import select

from models.db_storage import DBStorage
from models.user import Role, User


class Credential(NamedTuple):
    subject_id: str
    email: str
    password_hash: str


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class IdentityStore:
    def __init__(self, storage: DBStorage):
        self._storage = storage

    def find_credential_by_email(self, email: str) -> Optional[Credential]:
        email = normalize_email(email)
        if not email:
            return None
        with self._storage.transaction() as session:
            user = session.scalars(select(User).where(User.email == email)).first()
            if user is None:
                return None
            return Credential(subject_id=user.id, email=user.email, password_hash=user.password_hash)

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Fetch one user by id"""
        if not user_id:
            return None
        with self._storage.transaction() as session:
            return session.get(User, user_id)

    def email_exists(self, email: str) -> bool:
        with self._storage.transaction() as session:
            found = session.scalars(select(User.id).where(User.email == normalize_email(email))).first()
            return found is not None

    def create_user(self, email: str, password_hash: str, name: str | None = None,
                    role: Role = Role.USER) -> User:
        """Insert a user. A duplicate email surfaces as sqlalchemy IntegrityError."""
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            name=(name or "").strip() or None,
            role=role,
        )
        with self._storage.transaction() as session:
            session.add(user)
        return user

    def set_role(self, user_id: str, role: Role) -> Optional[User]:
        with self._storage.transaction() as session:
            user = session.get(User, user_id)
            if user is None:
                return None
            user.role = role
        return user
