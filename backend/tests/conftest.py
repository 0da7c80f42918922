"""Pytest fixtures: a fresh app and in-memory schema per test.

Each test gets its own Flask application bound to an in-memory SQLite
database (Flask-SQLAlchemy pins it to one connection with ``StaticPool``). The
app context stays pushed for the whole test, so factories, services and the
test client all share the same scoped session.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from typing import Any

import pytest
from flask import Flask
from lms_auth import create_app
from lms_auth.core.config import TestingConfig
from lms_auth.core.extensions import db as _db
from lms_auth.services._shared.ports.clock import FixedClock


@pytest.fixture()
def clock() -> FixedClock:
    """Manually driven clock installed into the app; starts at the wall time."""
    return FixedClock(datetime.now(tz=UTC).replace(microsecond=0))


@pytest.fixture()
def app(clock: FixedClock) -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig`, a created schema and an
        active app context.
    """
    application = create_app(TestingConfig)
    application.extensions["clock"] = clock
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app: Flask):
    """Database extension bound to the testing application."""
    return _db


@pytest.fixture()
def session(db):
    """Scoped session shared by factories, services and requests."""
    return db.session


@pytest.fixture()
def client(app: Flask):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2030-01-01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2030-01-01")

    return _factory


# -- Hook up Factory Boy to the app's scoped session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "app" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
