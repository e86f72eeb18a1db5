from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Lesson:
    """Domain entity: a weekly lesson slot.

    A lesson repeats every week on ``day_of_week`` (0=Sunday .. 6=Saturday)
    at ``start_time_minutes`` after midnight. There is no end date.
    """

    lesson_id: int
    subject: str
    class_id: int
    teacher_id: int
    day_of_week: int
    start_time_minutes: int
    duration_minutes: int = 60
    lesson_count: int = 1
    attendance_window_minutes: int = 30
    location: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def end_time_minutes(self) -> int:
        return self.start_time_minutes + self.duration_minutes

    def to_dict(self) -> dict:
        return {
            "id": self.lesson_id,
            "subject": self.subject,
            "classId": self.class_id,
            "teacherId": self.teacher_id,
            "dayOfWeek": self.day_of_week,
            "startTimeMinutes": self.start_time_minutes,
            "durationMinutes": self.duration_minutes,
            "lessonCount": self.lesson_count,
            "attendanceWindowMinutes": self.attendance_window_minutes,
            "location": self.location,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LessonDraft:
    """Validated input for creating or updating a lesson."""

    subject: str
    class_id: int
    teacher_id: int
    day_of_week: int
    start_time_minutes: int
    duration_minutes: int
    lesson_count: int
    attendance_window_minutes: int
    location: Optional[str] = None
    is_active: bool = True
