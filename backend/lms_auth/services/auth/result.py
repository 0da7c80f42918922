"""Result type returned by the auth orchestrator.

Expected failures (bad credentials, duplicate email, spent refresh token) are
values, not exceptions; only infrastructure failures raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class AuthErrorKind(str, Enum):
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"


@dataclass(frozen=True, slots=True)
class AuthResult(Generic[T]):
    """
    Either a ``value`` or an ``error`` kind with a client-safe ``message``.

    :param value: Payload on success.
    :param error: Failure kind; ``None`` on success.
    :param message: Human-readable reason for the failure.
    """

    value: T | None = None
    error: AuthErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> AuthResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: AuthErrorKind, message: str) -> AuthResult[T]:
        return cls(error=error, message=message)


class RotationResult(str, Enum):
    """Outcome of checking a presented refresh token against the ledger."""

    OK = "ok"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    USER_INACTIVE = "user_inactive"
