from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import Clock, now_local
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import DAY_NAMES, AttendanceStatus, Role
from ..core.exceptions import AttendanceDeniedError, AuthorizationError, NotFoundError, ValidationError
from ..lessons.model import Lesson
from ..lessons.repository import LessonRepository
from ..users.model import SessionUser
from ..users.repository import UserRepository
from .evaluator import evaluate_marking
from .factory import MarkingStrategyFactory
from .model import AttendanceHistoryRow, AttendanceRecord, RecentAttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

RECENT_ATTENDANCE_LIMIT = 20


def parse_status(value: Any) -> AttendanceStatus:
    if value is None or value == "":
        return AttendanceStatus.ABSENT
    try:
        return AttendanceStatus(str(value).lower())
    except ValueError:
        raise ValidationError("Status must be 'present' or 'absent'")


class AttendanceService:
    """Use cases: mark and read attendance.

    Note: the decision whether marking is allowed now comes from
    ``evaluate_marking``; this class adds the I/O around it (lesson lookup,
    ownership rules, the upsert and the override log line).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        lessons: LessonRepository,
        users: UserRepository,
        *,
        strategy_factory: Optional[MarkingStrategyFactory] = None,
        clock: Clock = now_local,
    ):
        self._attendance = attendance
        self._lessons = lessons
        self._users = users
        self._factory = strategy_factory or MarkingStrategyFactory()
        self._clock = clock

    def _get_lesson(self, lesson_id: int) -> Lesson:
        lesson = self._lessons.get_by_id(int(lesson_id))
        if not lesson:
            raise NotFoundError("Lesson not found")
        return lesson

    def mark(
        self,
        *,
        actor: SessionUser,
        lesson_id: Any,
        student_id: Any,
        status: Any = AttendanceStatus.ABSENT,
        force: bool = False,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        lesson_id = require_positive_int(lesson_id, "Lesson ID")
        student_id = require_positive_int(student_id, "Student ID")
        status = status if isinstance(status, AttendanceStatus) else parse_status(status)
        now = now or self._clock()

        lesson = self._get_lesson(lesson_id)
        decision = evaluate_marking(lesson, now=now, role=actor.role, force=force, factory=self._factory)
        if not decision.allowed:
            raise AttendanceDeniedError(decision.message or "Attendance window is not open", payload=decision.to_payload())

        if decision.override:
            logger.warning(
                "Attendance marked outside the standard window: lesson=%s student=%s by %s %s "
                "(window %s - %s, now %s)",
                lesson.lesson_id,
                student_id,
                actor.role.value,
                actor.user_id,
                decision.window.opens_at.isoformat(),
                decision.window.closes_at.isoformat(),
                now.isoformat(),
            )

        if actor.is_student:
            if student_id != actor.user_id:
                raise AuthorizationError("You can only mark your own attendance")
            if actor.class_id != lesson.class_id:
                raise AuthorizationError("You are not part of this class")
        elif actor.is_teacher and lesson.teacher_id != actor.user_id:
            raise AuthorizationError("You can only mark attendance for your own lessons")

        student = self._users.get_by_id(student_id)
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")

        record = self._attendance.upsert(
            lesson_id=lesson.lesson_id,
            student_id=student_id,
            occurrence_date=decision.window.occurrence_date,
            status=status,
            marked_at=now,
        )
        logger.info(
            "Attendance %s: lesson=%s student=%s occurrence=%s",
            status.value,
            lesson.lesson_id,
            student_id,
            decision.window.occurrence_date.isoformat(),
        )
        return record

    def list_for(
        self,
        *,
        actor: SessionUser,
        lesson_id: Optional[int] = None,
        student_id: Optional[int] = None,
        day_name: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Attendance visible to ``actor``, optionally filtered.

        Students see their own records; teachers those of their lessons
        (by lesson or by weekday name); admins everything.
        """
        if actor.is_student:
            if student_id and int(student_id) != actor.user_id:
                raise AuthorizationError("Unauthorized to view this attendance data")
            lesson_ids = [int(lesson_id)] if lesson_id else None
            return self._attendance.list_records(lesson_ids=lesson_ids, student_id=actor.user_id)

        day_number: Optional[int] = None
        if day_name and not lesson_id:
            if day_name not in DAY_NAMES:
                raise ValidationError(f"Invalid day of week: {day_name}")
            day_number = DAY_NAMES.index(day_name)

        if actor.is_teacher:
            if lesson_id:
                lesson = self._lessons.get_by_id(int(lesson_id))
                if not lesson or lesson.teacher_id != actor.user_id:
                    raise AuthorizationError("Unauthorized to view this attendance data")
                return self._attendance.list_records(lesson_ids=[lesson.lesson_id], student_id=student_id)
            if day_number is None:
                raise AuthorizationError("Unauthorized to view this attendance data")
            lessons = self._lessons.list_lessons(teacher_id=actor.user_id, day_of_week=day_number)
            return self._attendance.list_records(lesson_ids=[l.lesson_id for l in lessons], student_id=student_id)

        if lesson_id:
            return self._attendance.list_records(lesson_ids=[int(lesson_id)], student_id=student_id)
        if day_number is not None:
            lessons = self._lessons.list_lessons(day_of_week=day_number)
            return self._attendance.list_records(lesson_ids=[l.lesson_id for l in lessons], student_id=student_id)
        return self._attendance.list_records(student_id=student_id)

    def history(self, student_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceHistoryRow]:
        """Attendance of one student joined with lesson details, newest first."""
        return self._attendance.history_for_student(int(student_id), limit=int(limit))

    def recent(self, *, limit: int = RECENT_ATTENDANCE_LIMIT) -> Sequence[RecentAttendanceRow]:
        return self._attendance.recent(limit=int(limit))
