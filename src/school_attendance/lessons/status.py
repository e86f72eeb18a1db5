from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import minutes_since_midnight, sunday_based_weekday
from ..core.enums import LessonStatus
from .model import Lesson

_CSS = {
    LessonStatus.NOT_STARTED: "bg-neutral-200 text-neutral-500",
    LessonStatus.IN_PROGRESS: "bg-primary bg-opacity-10 text-primary",
    LessonStatus.COMPLETED: "bg-success bg-opacity-10 text-success",
}


@dataclass(frozen=True)
class LessonStatusView:
    lesson_id: int
    status: LessonStatus
    is_active: bool
    css_class: str

    def to_dict(self) -> dict:
        return {
            "lessonId": self.lesson_id,
            "status": self.status.value,
            "isActive": self.is_active,
            "cssClass": self.css_class,
        }


def _weekday_has_passed(day_of_week: int, today: int) -> bool:
    # Sunday (0) is treated as the end of the week.
    if today == 0:
        return day_of_week != 0
    return today > day_of_week


def lesson_status(lesson: Lesson, now: datetime) -> LessonStatus:
    today = sunday_based_weekday(now)

    if lesson.day_of_week == today:
        current = minutes_since_midnight(now)
        if current > lesson.end_time_minutes:
            return LessonStatus.COMPLETED
        if current >= lesson.start_time_minutes:
            return LessonStatus.IN_PROGRESS
        return LessonStatus.NOT_STARTED

    if _weekday_has_passed(lesson.day_of_week, today):
        return LessonStatus.COMPLETED
    return LessonStatus.NOT_STARTED


def classify_lesson_status(lesson: Lesson, now: datetime) -> LessonStatusView:
    status = lesson_status(lesson, now)
    return LessonStatusView(
        lesson_id=lesson.lesson_id,
        status=status,
        is_active=lesson.is_active,
        css_class=_CSS[status],
    )
