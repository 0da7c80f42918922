"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: no Flask or HTTP imports. The
translation to RFC 7807 responses is done by
``BaseService.translate_exceptions()`` against ``lms_auth/core/errors.py``.

The auth orchestrator does not raise these for expected outcomes; it returns
an ``AuthResult`` instead. They remain the contract for the user
administration service.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the column list
    (``UNIQUE constraint failed: users.email``), so the column suffix of the
    convention-built name is matched too.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name, e.g. ``uq_users_email``.
    :returns: ``True`` if the error matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>" (single-word column names)
    if name.startswith("uq_"):
        table, _, column = name[3:].rpartition("_")
        return bool(table) and f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService translates them to ``APIError``.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when the acting user may not perform the operation."""

    def __init__(self, message: str = "You are not allowed to perform this action.") -> None:
        super().__init__(message)


class ValidationFailedError(ServiceError):
    """Raised when input is well-formed but violates a business rule."""
