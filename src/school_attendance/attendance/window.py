"""Attendance window math.

Times are naive local datetimes, the same convention as the rest of the app
(``datetime.now()`` and MySQL ``DATETIME`` columns).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..common.datetime_utils import sunday_based_weekday
from ..core.constants import INSTANT_LESSON_HORIZON_HOURS, MINUTES_PER_DAY, PRE_CLASS_GRACE_MINUTES
from ..core.exceptions import InvalidLessonScheduleError
from ..lessons.model import Lesson


@dataclass(frozen=True)
class AttendanceWindow:
    occurrence_date: date
    starts_at: datetime
    opens_at: datetime
    closes_at: datetime
    is_instant: bool

    def contains(self, moment: datetime) -> bool:
        return self.opens_at <= moment <= self.closes_at

    @property
    def length(self) -> timedelta:
        return self.closes_at - self.opens_at


def _require_int(value, field_name: str, *, minimum: int, maximum: int | None = None) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise InvalidLessonScheduleError(f"{field_name} is missing or not an integer: {value!r}")
    if value < minimum or (maximum is not None and value > maximum):
        bound = f"{minimum}..{maximum}" if maximum is not None else f">= {minimum}"
        raise InvalidLessonScheduleError(f"{field_name} must be {bound}, got {value}")
    return value


def validate_schedule(lesson: Lesson) -> None:
    """Reject schedule values that would produce nonsensical dates."""
    _require_int(lesson.day_of_week, "day_of_week", minimum=0, maximum=6)
    _require_int(lesson.start_time_minutes, "start_time_minutes", minimum=0, maximum=MINUTES_PER_DAY - 1)
    _require_int(lesson.duration_minutes, "duration_minutes", minimum=1)
    _require_int(lesson.attendance_window_minutes, "attendance_window_minutes", minimum=1)


def is_instant_lesson(lesson: Lesson, now: datetime) -> bool:
    """A lesson created less than 24 hours ago counts as an instant lesson."""
    if lesson.created_at is None:
        return False
    return now - lesson.created_at < timedelta(hours=INSTANT_LESSON_HORIZON_HOURS)


def resolve_occurrence_date(day_of_week: int, today: date) -> date:
    """Most recent date (today or earlier) falling on ``day_of_week``.

    Never looks forward: a lesson later today resolves to today, a lesson
    tomorrow resolves to six days ago.
    """
    days_back = (sunday_based_weekday(today) - day_of_week + 7) % 7
    return today - timedelta(days=days_back)


def compute_window(lesson: Lesson, now: datetime) -> AttendanceWindow:
    validate_schedule(lesson)

    if is_instant_lesson(lesson, now):
        created_at = lesson.created_at
        return AttendanceWindow(
            occurrence_date=created_at.date(),
            starts_at=created_at,
            opens_at=created_at,
            closes_at=created_at + timedelta(minutes=lesson.attendance_window_minutes),
            is_instant=True,
        )

    occurrence_date = resolve_occurrence_date(lesson.day_of_week, now.date())
    hours, minutes = divmod(lesson.start_time_minutes, 60)
    starts_at = datetime.combine(occurrence_date, time(hour=hours, minute=minutes))

    # timedelta arithmetic wraps lessons that run past midnight onto the next day
    return AttendanceWindow(
        occurrence_date=occurrence_date,
        starts_at=starts_at,
        opens_at=starts_at - timedelta(minutes=PRE_CLASS_GRACE_MINUTES),
        closes_at=starts_at + timedelta(minutes=lesson.duration_minutes),
        is_instant=False,
    )
