from __future__ import annotations

from datetime import date, datetime
from typing import Callable

Clock = Callable[[], datetime]


def now_local() -> datetime:
    """Current local time.

    Note: Services take a ``clock`` argument defaulting to this function so
    tests can pass a fixed time instead.
    """
    return datetime.now()


def sunday_based_weekday(moment: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday (Python uses 0=Monday)."""
    return (moment.weekday() + 1) % 7


def minutes_since_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def isoformat_or_none(value: datetime | date | None) -> str | None:
    return value.isoformat() if value is not None else None
