"""Refresh-token ledger rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms_auth.core.extensions import db

from .base import PKMixin, ReprMixin, as_utc, utcnow


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    A single-use, revocable bearer secret that can be exchanged for a new
    token pair.

    Fields
    ------
    user_id : int
        Owning user. Many rows may reference one user.
    token : str
        Opaque CSPRNG secret; unique.
    expires_at : datetime
        Absolute expiry (UTC). Expiry is computed on read, never written back.
    created_at : datetime
        Issuance instant (UTC).
    is_revoked : bool
        Flips once from ``False`` to ``True`` (explicit revoke or rotation).
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(500), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (UniqueConstraint("token", name="uq_refresh_tokens_token"),)

    def is_expired(self, now: datetime) -> bool:
        """Return ``True`` once ``now`` is strictly past ``expires_at``."""
        return as_utc(now) > as_utc(self.expires_at)

    def is_active(self, now: datetime) -> bool:
        """Return ``True`` when neither revoked nor expired at ``now``."""
        return not self.is_revoked and not self.is_expired(now)
