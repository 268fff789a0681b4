"""
Session lifecycle: login, refresh (rotation), logout.

SessionService is the boundary of the core. Whatever goes wrong below it
leaves as one of: InvalidCredentials, InvalidOrExpiredToken,
AlgorithmRejected, StoreUnavailable (retryable) or InternalError.

Retrying refresh() after a StoreUnavailable timeout may itself fail with
InvalidOrExpiredToken: if the first attempt committed its rotation before
the timeout fired, the presented secret is already spent. Clients must
then log in again.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import timedelta
from typing import NamedTuple

from models.identity_store import IdentityStore, normalize_email
from models.refresh_token_store import RefreshTokenStore
from utils.errors import (
    AlgorithmRejected,
    InternalError,
    InvalidCredentials,
    InvalidOrExpiredToken,
    SessionError,
    TokenError,
)
from utils.security import CredentialVerifier
from utils.tokens import AccessTokenClaims, AccessTokenCodec

log = logging.getLogger(__name__)

TOKEN_TYPE = "bearer"


class TokenPair(NamedTuple):
    access_token: str
    access_token_expires_in: int
    refresh_secret: str
    token_type: str = TOKEN_TYPE


class SessionService:
    def __init__(
        self,
        identities: IdentityStore,
        verifier: CredentialVerifier,
        codec: AccessTokenCodec,
        refresh_tokens: RefreshTokenStore,
        refresh_ttl: timedelta,
    ):
        self.identities = identities
        self.verifier = verifier
        self.codec = codec
        self.refresh_tokens = refresh_tokens
        self.refresh_ttl = refresh_ttl

    @contextmanager
    def _boundary(self, operation: str):
        """Let taxonomy errors through; log and wrap anything else."""
        try:
            yield
        except SessionError:
            raise
        except Exception as exc:
            log.exception("%s failed", operation)
            raise InternalError(f"{operation}: {exc.__class__.__name__}") from exc

    def login(self, email: str, password: str) -> TokenPair:
        """Authenticate by password and issue a new session."""
        with self._boundary("login"):
            credential = self.identities.find_credential_by_email(normalize_email(email))
            if credential is None:
                # same cost and same error as a wrong password
                self.verifier.verify_dummy(password)
                raise InvalidCredentials()
            if not self.verifier.verify(credential.password_hash, password):
                raise InvalidCredentials()
            pair = self.issue(credential.subject_id, credential.email)
        log.info("session opened for user %s", credential.subject_id)
        return pair

    def refresh(self, secret: str) -> TokenPair:
        """Rotate a refresh secret: spend it and issue a replacement pair."""
        with self._boundary("refresh"):
            record = self.refresh_tokens.find_and_invalidate(secret)
            if record is None:
                raise InvalidOrExpiredToken()
            # the email claim always reflects the current user record
            user = self.identities.find_by_id(record.subject_id)
            if user is None:
                log.warning("refresh for vanished user %s", record.subject_id)
                raise InvalidOrExpiredToken()
            pair = self.issue(user.id, user.email)
        log.info("session rotated for user %s (record %s spent)", record.subject_id, record.record_id)
        return pair

    def issue(self, subject_id: str, email: str) -> TokenPair:
        """Mint both halves of a pair. The only place tokens are created."""
        with self._boundary("issue"):
            record = self.refresh_tokens.create(subject_id, self.refresh_ttl)
            access_token = self.codec.encode(
                subject_id, email, self.codec.ttl, session_id=record.record_id
            )
            return TokenPair(
                access_token=access_token,
                access_token_expires_in=self.codec.access_ttl_seconds(),
                refresh_secret=record.secret,
            )

    def authenticate(self, access_token: str) -> AccessTokenClaims:
        """Decode a bearer token for a protected request."""
        try:
            return self.codec.decode(access_token)
        except AlgorithmRejected:
            raise
        except TokenError as exc:
            raise InvalidOrExpiredToken(exc.code) from exc

    def logout(self, claims: AccessTokenClaims) -> bool:
        """End the session the access token was issued with."""
        with self._boundary("logout"):
            revoked = self.refresh_tokens.revoke(claims.session_id)
        if revoked:
            log.info("session %s revoked by user %s", claims.session_id, claims.subject_id)
        return revoked

    def logout_everywhere(self, subject_id: str) -> int:
        with self._boundary("logout_everywhere"):
            count = self.refresh_tokens.revoke_all(subject_id)
        log.info("revoked %d sessions of user %s", count, subject_id)
        return count
