"""User model: the credential store of the auth service."""

from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from lms_auth.core.extensions import db
from lms_auth.core.security import hash_password
from lms_auth.core.security import verify_password as _verify_password

from .base import PKMixin, ReprMixin, TimestampMixin


class Role(str, Enum):
    """Closed set of roles carried in the ``role`` claim."""

    STUDENT = "Student"
    INSTRUCTOR = "Instructor"
    ADMIN = "Admin"
    SUPER_ADMIN = "SuperAdmin"

    @classmethod
    def parse(cls, value: str | Role | None) -> Role | None:
        """Return the member whose value equals ``value`` exactly, else ``None``."""
        if isinstance(value, Role):
            return value
        for member in cls:
            if member.value == value:
                return member
        return None


#: Roles a caller may pick for themselves at registration.
SELF_ASSIGNABLE_ROLES: frozenset[Role] = frozenset(
    {Role.STUDENT, Role.INSTRUCTOR, Role.ADMIN}
)

#: Roles allowed to administer other accounts.
ADMIN_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address."""
    return value.strip().lower()


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    full_name : str
        Display name, copied into the ``name`` claim.
    email : str
        Login email. Stored normalized (lowercase, trimmed) and unique.
    password_hash : str
        Salted digest (write-only setter via ``password``).
    role : str
        One of :class:`Role` values.
    is_active : bool
        Deactivated accounts cannot log in or refresh.
    """

    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.STUDENT.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        self.password_hash = hash_password(raw)

    def verify_password(self, raw: str) -> bool:
        """Return ``True`` when ``raw`` matches the stored digest."""
        return _verify_password(raw, self.password_hash)

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = normalize_email(value)
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("role")
    def _validate_role(self, key: str, value: str | Role) -> str:
        role = Role.parse(value)
        if role is None:
            raise ValueError(f"Unknown role: {value!r}")
        return role.value

    @validates("full_name")
    def _normalize_full_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Full name is required.")
        return value.strip()
