"""
RefreshTokenStore: persistent, keyed storage of refresh secrets.

State transitions are single conditional statements so that concurrent
callers can never both observe ``revoked = false`` and both win:

    Active --find_and_invalidate--> Rotated   (revoked = true)
    Active --revoke/revoke_all----> Revoked   (revoked = true)
    Active --time passes----------> Expired   (never written, only observed)

Secrets are stored as SHA-256 digests; the plaintext exists only in the
record returned by create() and in the caller's hands.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

from sqlalchemy import delete, update

from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from utils.security import digest_secret, generate_refresh_secret

log = logging.getLogger(__name__)


class RefreshTokenRecord(NamedTuple):
    record_id: str
    subject_id: str
    secret: str
    expires_at: datetime
    revoked: bool
    created_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we write is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RefreshTokenStore:
    def __init__(self, storage: DBStorage):
        self._storage = storage

    def create(self, subject_id: str, ttl: timedelta) -> RefreshTokenRecord:
        """Persist a fresh Active record for subject_id, expiring ttl from now."""
        secret = generate_refresh_secret()
        now = _utcnow()
        row = RefreshToken(
            user_id=subject_id,
            secret_hash=digest_secret(secret),
            revoked=False,
            created_at=now,
            expires_at=now + ttl,
        )
        with self._storage.transaction() as session:
            session.add(row)
        return RefreshTokenRecord(
            record_id=row.id,
            subject_id=subject_id,
            secret=secret,
            expires_at=row.expires_at,
            revoked=False,
            created_at=now,
        )

    def find_and_invalidate(self, secret: str) -> Optional[RefreshTokenRecord]:
        """
        Atomically consume an Active record.

        One UPDATE ... WHERE secret_hash = :h AND revoked = false AND
        expires_at > :now RETURNING. The database serializes concurrent
        updates of the same row, so exactly one caller gets the row back.
        Returns the record as it was before the flip, or None when the
        secret never existed, was already used or revoked, or has expired.
        """
        if not secret:
            return None
        now = _utcnow()
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.secret_hash == digest_secret(secret),
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .values(revoked=True, revoked_at=now, updated_at=now)
            .returning(
                RefreshToken.id,
                RefreshToken.user_id,
                RefreshToken.expires_at,
                RefreshToken.created_at,
            )
            .execution_options(synchronize_session=False)
        )
        with self._storage.transaction() as session:
            row = session.execute(stmt).first()
        if row is None:
            return None
        return RefreshTokenRecord(
            record_id=row.id,
            subject_id=row.user_id,
            secret=secret,
            expires_at=_as_utc(row.expires_at),
            revoked=False,
            created_at=_as_utc(row.created_at),
        )

    def revoke(self, record_id: str) -> bool:
        """Revoke one record. Idempotent; True only if this call flipped it."""
        if not record_id:
            return False
        now = _utcnow()
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == record_id, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        with self._storage.transaction() as session:
            changed = session.execute(stmt).rowcount
        return changed == 1

    def revoke_all(self, subject_id: str) -> int:
        """Revoke every Active record of a subject ("log out everywhere")."""
        now = _utcnow()
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == subject_id, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        with self._storage.transaction() as session:
            changed = session.execute(stmt).rowcount
        return int(changed or 0)

    def purge_expired(self, now: datetime | None = None) -> int:
        """Delete records whose expires_at has passed (passive expiry sweep)."""
        now = now or _utcnow()
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        with self._storage.transaction() as session:
            count = int(session.execute(stmt).rowcount or 0)
        log.info("purged %d expired refresh tokens", count)
        return count
