from __future__ import annotations

import pytest
from lms_auth.models import User
from lms_auth.uow import SQLAlchemyUnitOfWork
from sqlalchemy import func, select


def _user(email: str) -> User:
    user = User(full_name="Writer Test", email=email)
    user.password = "Secret6"
    return user


def _count(session) -> int:
    return session.execute(select(func.count()).select_from(User)).scalar_one()


def test_commits_on_success(app, session):
    with SQLAlchemyUnitOfWork() as uow:
        uow.users.add(_user("ok@example.com"))

    session.rollback()  # nothing pending: the row was committed
    assert _count(session) == 1


def test_rolls_back_on_error(app, session):
    with pytest.raises(RuntimeError, match="boom"):
        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(_user("lost@example.com"))
            raise RuntimeError("boom")

    assert _count(session) == 0


def test_repositories_share_the_session(app):
    with SQLAlchemyUnitOfWork() as uow:
        assert uow.users.session is uow.session
        assert uow.refresh_tokens.session is uow.session
