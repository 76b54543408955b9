"""Wall-clock source for shift timestamps.

Shift times are local civil time in one operating timezone, stored naive and
truncated to the minute. Overtime boundaries (08:00, 20:00, Sunday) are
defined against that local clock, so nothing here ever converts to or from
UTC.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, runtime_checkable
from zoneinfo import ZoneInfo

from driver_log.config import get_settings


@runtime_checkable
class Clock(Protocol):
    """Interface for the current local wall-clock time."""

    def now(self) -> datetime:
        """Return the current naive local time, minute precision."""
        ...

    def today(self) -> date:
        """Return the current local calendar date."""
        ...


class SystemClock:
    """Reads the system clock and projects it onto the operating timezone."""

    def __init__(self, tz_name: str) -> None:
        self._tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None, second=0, microsecond=0)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock pinned to a given local time. Use ``set`` to move it."""

    def __init__(self, current: datetime) -> None:
        self._current = current.replace(second=0, microsecond=0)

    def set(self, current: datetime) -> None:
        self._current = current.replace(second=0, microsecond=0)

    def now(self) -> datetime:
        return self._current

    def today(self) -> date:
        return self._current.date()


_clock: Clock | None = None


def get_clock() -> Clock:
    """FastAPI dependency for the operating-timezone clock."""
    global _clock
    if _clock is None:
        _clock = SystemClock(get_settings().timezone)
    return _clock


def set_clock(clock: Clock | None) -> None:
    """Override the clock (for testing). ``None`` restores the system clock."""
    global _clock
    _clock = clock
