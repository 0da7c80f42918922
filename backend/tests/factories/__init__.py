"""Factory Boy helpers wired to the application's scoped session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Store the session provided by the pytest fixture layer."""

    _session = None

    @classmethod
    def set(cls, session):
        """Register the SQLAlchemy session used to persist factory objects."""
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered SQLAlchemy session.

        Raises
        ------
        RuntimeError
            If factories are used in a test that has no ``app`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did the test request the 'app' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting with ``flush`` so rows get ids without committing."""

    class Meta:
        abstract = True
        # Callable keeps Factory Boy lazy and resolves the current session.
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
