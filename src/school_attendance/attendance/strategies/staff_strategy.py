from __future__ import annotations

from datetime import datetime

from ...lessons.model import Lesson
from ..window import AttendanceWindow
from .base import MarkingDecision, MarkingStrategy


class StaffMarkingStrategy(MarkingStrategy):
    """Teachers and admins may always mark; outside the window it is an override."""

    def decide(self, *, lesson: Lesson, window: AttendanceWindow, now: datetime, force: bool) -> MarkingDecision:
        return MarkingDecision(
            allowed=True,
            window=window,
            now=now,
            override=not force and not window.contains(now),
        )
