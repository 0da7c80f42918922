"""
DTOs for the user administration service.

They keep ORM ``User`` rows from leaking past the service boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Partial update of a user account. ``None`` means "leave unchanged".

    :param full_name: New display name.
    :type full_name: str | None
    :param email: New login email.
    :type email: str | None
    :param password: New raw password.
    :type password: str | None
    :param role: New role; administrators only.
    :type role: str | None
    :param is_active: New active flag; administrators only.
    :type is_active: bool | None
    """

    full_name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None
    is_active: bool | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public-safe user representation (no password digest).

    :param id: User identifier.
    :param full_name: Display name.
    :param email: Normalized email.
    :param role: Role value.
    :param is_active: Whether the account may log in.
    :param created_at: Creation instant.
    :param updated_at: Last update instant, if any.
    """

    id: int
    full_name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None
