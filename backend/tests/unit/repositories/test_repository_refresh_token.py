from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from lms_auth.models import RefreshToken
from lms_auth.repositories import RefreshTokenRepository
from sqlalchemy import select

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory

NOW = datetime(2030, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def repo(session) -> RefreshTokenRepository:
    return RefreshTokenRepository(session=session)


def test_get_active_skips_revoked_rows(repo):
    live = RefreshTokenFactory(token="live")
    dead = RefreshTokenFactory(token="dead", is_revoked=True)

    assert repo.get_active("live") is live
    assert repo.get_active("dead") is None
    assert repo.get(dead.id).is_revoked is True
    assert repo.get_active("missing") is None


def test_revoke_if_active_succeeds_exactly_once(repo):
    row = RefreshTokenFactory()

    assert repo.revoke_if_active(row.id) is True
    assert repo.revoke_if_active(row.id) is False
    assert row.is_revoked is True


def test_list_for_user_in_issue_order(repo):
    owner = UserFactory()
    other = UserFactory()
    second = RefreshTokenFactory(user=owner, created_at=NOW)
    first = RefreshTokenFactory(user=owner, created_at=NOW - timedelta(hours=1))
    RefreshTokenFactory(user=other, created_at=NOW)

    assert repo.list_for_user(owner.id) == [first, second]


def test_purge_removes_expired_and_old_revoked_rows(repo, session):
    owner = UserFactory()
    RefreshTokenFactory(
        user=owner, token="expired", created_at=NOW - timedelta(days=10),
        expires_at=NOW - timedelta(days=3),
    )
    RefreshTokenFactory(
        user=owner, token="revoked-old", created_at=NOW - timedelta(days=2),
        expires_at=NOW + timedelta(days=5), is_revoked=True,
    )
    RefreshTokenFactory(
        user=owner, token="revoked-new", created_at=NOW + timedelta(minutes=5),
        expires_at=NOW + timedelta(days=7), is_revoked=True,
    )
    RefreshTokenFactory(
        user=owner, token="active", created_at=NOW - timedelta(days=1),
        expires_at=NOW + timedelta(days=6),
    )

    deleted = repo.purge(NOW)
    session.expire_all()

    assert deleted == 2
    remaining = session.execute(select(RefreshToken.token).order_by(RefreshToken.token))
    assert list(remaining.scalars()) == ["active", "revoked-new"]
