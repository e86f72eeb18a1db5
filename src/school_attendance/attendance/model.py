from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one lesson occurrence."""

    attendance_id: int
    lesson_id: int
    student_id: int
    occurrence_date: date
    status: AttendanceStatus
    marked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "lessonId": self.lesson_id,
            "studentId": self.student_id,
            "occurrenceDate": isoformat_or_none(self.occurrence_date),
            "status": self.status.value,
            "markedAt": isoformat_or_none(self.marked_at),
        }


@dataclass(frozen=True)
class AttendanceHistoryRow:
    """Read-model: an attendance record joined with its lesson."""

    attendance_id: int
    lesson_id: int
    subject: str
    day_of_week: int
    start_time_minutes: int
    duration_minutes: int
    location: Optional[str]
    occurrence_date: date
    status: AttendanceStatus
    marked_at: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "lessonId": self.lesson_id,
            "subject": self.subject,
            "dayOfWeek": self.day_of_week,
            "startTimeMinutes": self.start_time_minutes,
            "durationMinutes": self.duration_minutes,
            "location": self.location,
            "occurrenceDate": isoformat_or_none(self.occurrence_date),
            "status": self.status.value,
            "markedAt": isoformat_or_none(self.marked_at),
        }


@dataclass(frozen=True)
class RecentAttendanceRow:
    """Read-model for the admin dashboard feed."""

    attendance_id: int
    student_id: int
    student_name: str
    lesson_id: int
    subject: str
    class_name: Optional[str]
    status: AttendanceStatus
    marked_at: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "lessonId": self.lesson_id,
            "subject": self.subject,
            "className": self.class_name or "Unknown Class",
            "status": self.status.value,
            "markedAt": isoformat_or_none(self.marked_at),
        }


@dataclass(frozen=True)
class AttendanceTally:
    present: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent

    @property
    def rate(self) -> float:
        """Present share in percent; 0 when nothing was recorded."""
        return (self.present / self.total) * 100 if self.total else 0.0
