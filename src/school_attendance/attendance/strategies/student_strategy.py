from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import sunday_based_weekday
from ...core.enums import DenialReason
from ...lessons.model import Lesson
from ..window import AttendanceWindow
from .base import MarkingDecision, MarkingStrategy

FUTURE_LESSON_MESSAGE = "Cannot mark attendance for future lessons"
WINDOW_CLOSED_MESSAGE = "Attendance window is not open"


class StudentMarkingStrategy(MarkingStrategy):
    """Students mark only on the lesson's weekday and only inside the window.

    ``force`` and inactive lessons lift the window limit but not the weekday
    check.
    """

    def decide(self, *, lesson: Lesson, window: AttendanceWindow, now: datetime, force: bool) -> MarkingDecision:
        if not window.is_instant and lesson.day_of_week != sunday_based_weekday(now):
            return MarkingDecision(
                allowed=False,
                window=window,
                now=now,
                reason=DenialReason.FUTURE_LESSON,
                message=FUTURE_LESSON_MESSAGE,
            )

        if force or not lesson.is_active or window.contains(now):
            return MarkingDecision(allowed=True, window=window, now=now)

        return MarkingDecision(
            allowed=False,
            window=window,
            now=now,
            reason=DenialReason.WINDOW_CLOSED,
            message=WINDOW_CLOSED_MESSAGE,
        )
