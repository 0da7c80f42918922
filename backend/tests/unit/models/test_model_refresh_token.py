from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from lms_auth.models import RefreshToken
from sqlalchemy.exc import IntegrityError

from tests.factories.refresh_token import RefreshTokenFactory

EXPIRES = datetime(2030, 1, 8, 12, 0, tzinfo=UTC)


def _row(**overrides) -> RefreshToken:
    fields = {"user_id": 1, "token": "t", "expires_at": EXPIRES, "is_revoked": False}
    fields.update(overrides)
    return RefreshToken(**fields)


class TestExpiry:
    def test_valid_at_exact_expiry_instant(self):
        assert _row().is_expired(EXPIRES) is False

    def test_expired_one_microsecond_later(self):
        assert _row().is_expired(EXPIRES + timedelta(microseconds=1)) is True

    def test_naive_stored_value_is_read_as_utc(self):
        row = _row(expires_at=EXPIRES.replace(tzinfo=None))
        assert row.is_expired(EXPIRES - timedelta(seconds=1)) is False
        assert row.is_expired(EXPIRES + timedelta(seconds=1)) is True

    def test_active_requires_not_revoked_and_not_expired(self):
        before = EXPIRES - timedelta(days=1)
        assert _row().is_active(before) is True
        assert _row(is_revoked=True).is_active(before) is False
        assert _row().is_active(EXPIRES + timedelta(seconds=1)) is False


def test_token_unique_constraint(session):
    first = RefreshTokenFactory()
    with pytest.raises(IntegrityError):
        RefreshTokenFactory(user=first.user, token=first.token)


def test_factory_row_is_active_by_default(session):
    row = RefreshTokenFactory()
    assert row.id is not None
    assert row.is_revoked is False
    assert row.is_active(datetime.now(tz=UTC)) is True
