"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lms_auth.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    Coordinates a transactional boundary for one auth use-case.

    Responsibilities:
    - Expose the ``users`` and ``refresh_tokens`` repositories on one session.
    - Commit on success, rollback on error.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
