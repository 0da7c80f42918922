"""Unit of Work abstractions and the SQLAlchemy-backed implementations.

Services depend on :class:`UnitOfWork`; the concrete scopes bind the user and
refresh-token repositories to the Flask-scoped session.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
