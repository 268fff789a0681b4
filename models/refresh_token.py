"""
RefreshToken model: server-side state of refresh secrets so they can be
rotated and revoked.
Fields:
- id (primary key, the record id)
- user_id (String(36)) - FK to users.id
- secret_hash - SHA-256 of the opaque secret; the secret itself is never stored
- revoked (bool) + revoked_at
- created_at, expires_at
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, UniqueConstraint

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    secret_hash = Column(String(64), nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "secret_hash", name="uq_refresh_tokens_user_secret"),
        Index("ix_refresh_tokens_secret_hash", "secret_hash"),
        # passive expiry sweeps filter on this column
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
