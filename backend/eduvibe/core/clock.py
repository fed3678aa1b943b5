"""
Clock abstractions for the scheduling core.

Services never call ``datetime.now()`` directly; they receive a clock so the
"session must be in the future" guard and lifecycle timestamps are
deterministic under test.
"""

from datetime import date, datetime, time
from typing import Optional, Protocol, runtime_checkable

import pytz

from .config import settings


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant in the platform timezone."""

    @property
    def tz(self) -> pytz.BaseTzInfo:
        ...

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in the configured platform timezone."""

    def __init__(self, timezone_name: Optional[str] = None) -> None:
        self._tz = pytz.timezone(timezone_name or settings.default_timezone)

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


def today(clock: Clock) -> date:
    """Get 'today' according to the given clock."""
    return clock.now().date()


def localize(clock: Clock, session_date: date, wall_time: time) -> datetime:
    """
    Combine a calendar date and wall-clock time in the clock's timezone.

    Args:
        clock: Clock providing the timezone
        session_date: Calendar date of the session
        wall_time: Naive wall-clock time

    Returns:
        Timezone-aware datetime
    """
    return clock.tz.localize(datetime.combine(session_date, wall_time))
