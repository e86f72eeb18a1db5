from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"


class LessonStatus(str, Enum):
    """Display status of a lesson relative to the current time."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class DenialReason(str, Enum):
    """Why a student was refused when marking attendance."""

    WINDOW_CLOSED = "WINDOW_CLOSED"
    FUTURE_LESSON = "FUTURE_LESSON"


DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
