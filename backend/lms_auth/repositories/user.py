"""User repository: lookups and password persistence."""

from __future__ import annotations

from typing import cast

from sqlalchemy import func, select

from lms_auth.models.user import User, normalize_email
from lms_auth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues tokens or decides whether a login succeeds; it only
    stores and finds users.
    """

    model = User

    def _sortable_fields(self):
        return {
            "id": User.id,
            "email": User.email,
            "full_name": User.full_name,
            "role": User.role,
            "created_at": User.created_at,
        }

    def _updatable_fields(self):
        """Publicly allowed updatable fields (password has its own path)."""
        return {"full_name", "email", "role", "is_active"}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by the normalized email.

        :param email: Address as typed by the caller.
        :returns: User instance or ``None``.
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_by_email_insensitive(self, email: str) -> User | None:
        """Fetch a user comparing ``lower(email)``; tolerates legacy mixed-case rows."""
        stmt = select(User).where(func.lower(User.email) == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def update_password(self, user: User, new_password: str) -> None:
        """Hash and store ``new_password`` for ``user``, then flush."""
        user.password = new_password
        self.flush()
