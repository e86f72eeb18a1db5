from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import (
    DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    DEFAULT_LESSON_DURATION_MINUTES,
    DEFAULT_LESSON_GAP_MINUTES,
)


@dataclass(frozen=True)
class SystemSettings:
    """School-wide defaults.

    Only the lesson/attendance defaults feed behaviour; the notification
    flags are stored for the admin UI.
    """

    default_attendance_window: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES
    auto_disable_attendance: bool = True
    allow_teacher_override: bool = True
    email_notifications: bool = True
    attendance_reminders: bool = True
    low_attendance_alerts: bool = True
    school_name: str = ""
    default_lesson_duration: int = DEFAULT_LESSON_DURATION_MINUTES
    default_lesson_gap: int = DEFAULT_LESSON_GAP_MINUTES
    updated_at: Optional[datetime] = None

    def as_fields(self) -> dict:
        data = asdict(self)
        data.pop("updated_at")
        return data

    def to_dict(self) -> dict:
        return {
            "defaultAttendanceWindow": self.default_attendance_window,
            "autoDisableAttendance": self.auto_disable_attendance,
            "allowTeacherOverride": self.allow_teacher_override,
            "emailNotifications": self.email_notifications,
            "attendanceReminders": self.attendance_reminders,
            "lowAttendanceAlerts": self.low_attendance_alerts,
            "schoolName": self.school_name,
            "defaultLessonDuration": self.default_lesson_duration,
            "defaultLessonGap": self.default_lesson_gap,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
