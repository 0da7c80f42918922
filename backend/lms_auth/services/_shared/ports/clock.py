from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port for reading the current UTC instant."""

    def now(self) -> datetime: ...


class SystemClock(Clock):
    """Wall clock used by the running application."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)


class FixedClock(Clock):
    """Manually driven clock used in unit tests.

    :param at: Initial instant; naive values are taken as UTC.
    """

    def __init__(self, at: datetime | None = None) -> None:
        value = at or datetime(2030, 1, 1, tzinfo=UTC)
        self._now = value if value.tzinfo else value.replace(tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> None:
        self._now = self._now + delta

    def set(self, at: datetime) -> None:
        self._now = at if at.tzinfo else at.replace(tzinfo=UTC)
