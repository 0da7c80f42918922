"""Refresh-token ledger repository."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import and_, delete, or_, select, update

from lms_auth.models.refresh_token import RefreshToken
from lms_auth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence for :class:`RefreshToken` rows.

    Revocation is a single conditional ``UPDATE`` so that two concurrent
    callers presenting the same token can never both observe success.
    """

    model = RefreshToken

    def _sortable_fields(self):
        return {"created_at": RefreshToken.created_at, "expires_at": RefreshToken.expires_at}

    def get_active(self, token: str) -> RefreshToken | None:
        """Return the non-revoked row matching ``token`` (expiry not checked).

        :param token: Opaque refresh-token string.
        :returns: Row or ``None`` when unknown or already revoked.
        """
        stmt = select(RefreshToken).where(
            RefreshToken.token == token,
            RefreshToken.is_revoked.is_(False),
        )
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def revoke_if_active(self, token_id: int) -> bool:
        """Flip ``is_revoked`` to ``True`` only if it is still ``False``.

        :param token_id: Row primary key.
        :returns: ``True`` for the one caller whose update changed the row.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount == 1)  # type: ignore[attr-defined]

    def list_for_user(self, user_id: int) -> list[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.created_at.asc(), RefreshToken.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def purge(self, cutoff: datetime) -> int:
        """Delete rows that expired, or were issued and revoked, before ``cutoff``.

        :returns: Number of deleted rows.
        """
        stmt = (
            delete(RefreshToken)
            .where(
                or_(
                    RefreshToken.expires_at < cutoff,
                    and_(RefreshToken.is_revoked.is_(True), RefreshToken.created_at < cutoff),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]
