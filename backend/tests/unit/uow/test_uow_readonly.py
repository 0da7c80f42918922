"""Read-only Unit of Work: flush guard, commit refusal and outer-transaction attach."""

from __future__ import annotations

import pytest
from lms_auth.models import User
from lms_auth.uow import SQLAlchemyReadOnlyUnitOfWork
from sqlalchemy import func, select

from tests.factories.user import UserFactory


def _count(session) -> int:
    return session.execute(select(func.count()).select_from(User)).scalar_one()


def test_blocks_orm_flush(app, session):
    with pytest.raises(RuntimeError, match="flush blocked"):
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = User(full_name="Nope", email="nope@example.com")
            user.password = "Secret6"
            uow.session.add(user)
            uow.session.flush()

    assert _count(session) == 0


def test_commit_is_refused(app):
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        with pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()


def test_reads_work_and_listener_is_removed(app, session):
    UserFactory(email="reader@example.com")
    session.commit()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        assert uow.users.get_by_email("reader@example.com") is not None

    # Writes are allowed again once the scope is closed.
    UserFactory(email="writer@example.com")
    session.commit()
    assert _count(session) == 2


def test_attaches_to_outer_transaction_without_rolling_it_back(app, session):
    UserFactory(email="pending@example.com")  # flushed, not committed

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        assert uow.users.exists_by_email("pending@example.com")

    assert _count(session) == 1
