"""
Calendar clock — the single source of "today" for the whole process.

Every day-level comparison (streak transitions, ledger days, deadline
arithmetic, reminder gating) reads from a Clock instead of calling
date.today() ad hoc. The time zone comes from settings.TIMEZONE and is
fixed for the lifetime of the process.

Routers receive the clock through the `get_clock` dependency, so tests
swap in a FixedClock via `app.dependency_overrides`.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from goalstreak.core.config import settings


class Clock:
    """Wall clock pinned to one IANA time zone."""

    def __init__(self, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)

    def today(self) -> date:
        return self.now().date()

    def yesterday(self) -> date:
        return self.today() - timedelta(days=1)


class FixedClock(Clock):
    """Clock frozen on a given day. `advance()` moves it forward."""

    def __init__(self, current: date, tz_name: str = "UTC"):
        super().__init__(tz_name)
        self.current = current

    def now(self) -> datetime:
        return datetime.combine(self.current, time(12, 0), tzinfo=self.tz)

    def today(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> date:
        self.current = self.current + timedelta(days=days)
        return self.current


_clock = Clock(settings.TIMEZONE)


def get_clock() -> Clock:
    """FastAPI dependency returning the process-wide clock."""
    return _clock
