import re

import pytest

from utils.security import CredentialVerifier, digest_secret, generate_refresh_secret

from helpers import CountingHasher


@pytest.fixture(scope="module")
def verifier():
    return CredentialVerifier()


def test_hash_then_verify(verifier):
    hashed = verifier.hash("p@ss1")
    assert hashed.startswith("$argon2id$")
    assert hashed != "p@ss1"
    assert verifier.verify(hashed, "p@ss1") is True
    assert verifier.verify(hashed, "p@ss2") is False


def test_hash_is_salted(verifier):
    assert verifier.hash("same") != verifier.hash("same")


def test_empty_password_never_raises(verifier):
    hashed = verifier.hash("")
    assert hashed
    assert verifier.verify(hashed, "") is False


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$argon2id$v=19$garbage", "$2b$12$bcryptlooking"])
def test_malformed_hash_is_false(verifier, bad_hash):
    assert verifier.verify(bad_hash, "anything") is False


def test_verify_dummy_is_always_false(verifier):
    assert verifier.verify_dummy("p@ss1") is False
    assert verifier.verify_dummy("") is False


def test_refresh_secrets_are_unique_and_url_safe():
    secrets = {generate_refresh_secret() for _ in range(10_000)}
    assert len(secrets) == 10_000
    sample = next(iter(secrets))
    # 32 random bytes -> 43 base64url characters, no padding
    assert len(sample) >= 43
    assert re.fullmatch(r"[A-Za-z0-9_-]+", sample)


def test_digest_secret_is_stable_and_not_the_secret():
    secret = generate_refresh_secret()
    assert digest_secret(secret) == digest_secret(secret)
    assert digest_secret(secret) != secret
    assert len(digest_secret(secret)) == 64


@pytest.mark.parametrize("plaintext", ["", None])
def test_empty_password_still_spends_one_verification(verifier, monkeypatch, plaintext):
    hashed = verifier.hash("real password")
    counter = CountingHasher(verifier._ph)
    monkeypatch.setattr(verifier, "_ph", counter)

    assert verifier.verify(hashed, plaintext) is False
    assert counter.verifications == 1


def test_missing_hash_still_spends_one_verification(verifier, monkeypatch):
    counter = CountingHasher(verifier._ph)
    monkeypatch.setattr(verifier, "_ph", counter)

    assert verifier.verify("", "anything") is False
    assert counter.verifications == 1
