from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import OperationalError

from models.refresh_token import RefreshToken
from models.db_storage import is_transient
from utils.errors import StoreUnavailable

TTL = timedelta(days=30)


def test_create_persists_active_record(store, storage, subject_id):
    before = datetime.now(timezone.utc)
    record = store.create(subject_id, TTL)

    assert record.subject_id == subject_id
    assert record.revoked is False
    assert record.secret
    assert before + TTL <= record.expires_at <= datetime.now(timezone.utc) + TTL

    with storage.transaction() as session:
        row = session.scalars(select(RefreshToken).where(RefreshToken.id == record.record_id)).one()
        # only the digest is stored
        assert row.secret_hash != record.secret
        assert row.revoked is False


def test_find_and_invalidate_is_single_use(store, subject_id):
    record = store.create(subject_id, TTL)

    consumed = store.find_and_invalidate(record.secret)
    assert consumed is not None
    assert consumed.record_id == record.record_id
    assert consumed.subject_id == subject_id
    # the pre-mutation view of the record
    assert consumed.revoked is False

    assert store.find_and_invalidate(record.secret) is None


@pytest.mark.parametrize("secret", ["", None, "never-issued"])
def test_find_and_invalidate_unknown(store, subject_id, secret):
    store.create(subject_id, TTL)
    assert store.find_and_invalidate(secret) is None


def test_expired_record_never_authenticates(store, subject_id):
    record = store.create(subject_id, timedelta(seconds=-1))
    assert store.find_and_invalidate(record.secret) is None
    assert store.find_and_invalidate(record.secret) is None


def test_rotation_touches_only_matching_record(store, subject_id):
    laptop = store.create(subject_id, TTL)
    phone = store.create(subject_id, TTL)

    assert store.find_and_invalidate(laptop.secret) is not None
    assert store.find_and_invalidate(phone.secret) is not None


def test_revoke_is_idempotent(store, subject_id):
    record = store.create(subject_id, TTL)

    assert store.revoke(record.record_id) is True
    assert store.revoke(record.record_id) is False
    assert store.find_and_invalidate(record.secret) is None


def test_revoke_unknown_record(store):
    assert store.revoke("does-not-exist") is False
    assert store.revoke(None) is False


def test_revoke_all(store, subject_id):
    records = [store.create(subject_id, TTL) for _ in range(3)]
    store.find_and_invalidate(records[0].secret)

    assert store.revoke_all(subject_id) == 2
    assert store.revoke_all(subject_id) == 0
    assert all(store.find_and_invalidate(r.secret) is None for r in records)


def test_purge_expired_removes_only_expired(store, storage, subject_id):
    live = store.create(subject_id, TTL)
    store.create(subject_id, timedelta(seconds=-5))
    store.create(subject_id, timedelta(seconds=-10))

    assert store.purge_expired() == 2
    with storage.transaction() as session:
        assert session.scalar(select(func.count()).select_from(RefreshToken)) == 1
    assert store.find_and_invalidate(live.secret) is not None


def test_transient_errors_become_store_unavailable(storage):
    with pytest.raises(StoreUnavailable) as excinfo:
        with storage.transaction():
            raise OperationalError("UPDATE refresh_tokens", {}, Exception("database is locked"))
    assert excinfo.value.retryable is True


def test_other_errors_propagate_unchanged(storage):
    with pytest.raises(KeyError):
        with storage.transaction():
            raise KeyError("boom")


@pytest.mark.parametrize(
    "message",
    [
        "database is locked",
        "canceling statement due to statement timeout",
        "server closed the connection unexpectedly",
    ],
)
def test_lock_and_timeout_errors_are_transient(message):
    assert is_transient(OperationalError("SELECT 1", {}, Exception(message)))


def test_invalidated_connection_is_transient():
    exc = OperationalError("SELECT 1", {}, Exception("boom"), connection_invalidated=True)
    assert is_transient(exc)


def test_permanent_operational_errors_are_not_store_unavailable(store, storage, subject_id):
    record = store.create(subject_id, TTL)
    with storage.transaction() as session:
        session.execute(text("DROP TABLE refresh_tokens"))

    with pytest.raises(OperationalError) as excinfo:
        store.find_and_invalidate(record.secret)
    assert "no such table" in str(excinfo.value)
    assert not is_transient(excinfo.value)
