from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..academics.repository import ClassRepository
from ..common.datetime_utils import Clock, minutes_since_midnight, now_local, sunday_based_weekday
from ..common.permissions import require_staff
from ..common.validators import optional_str, require_int_range, require_non_empty, require_positive_int
from ..core.constants import (
    DEFAULT_INSTANT_LOCATION,
    MAX_DURATION_MINUTES,
    MAX_LESSON_COUNT,
    MAX_SUBJECT_LENGTH,
    MIN_ATTENDANCE_WINDOW_MINUTES,
    MIN_DURATION_MINUTES,
    MIN_LESSON_COUNT,
    MINUTES_PER_DAY,
)
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..system.service import SettingsService
from ..users.model import SessionUser
from ..users.repository import TeacherDepartmentRepository, UserRepository
from .model import Lesson, LessonDraft
from .repository import LessonRepository
from .status import LessonStatusView, classify_lesson_status

logger = logging.getLogger(__name__)

DUPLICATE_LESSON_MESSAGE = (
    "A lesson with the same day, subject, and start time already exists for this class and teacher"
)


class LessonService:
    """Use cases: schedule lessons and list them per role.

    Note: ``clock`` is injectable so tests can pin "now".
    """

    def __init__(
        self,
        lessons: LessonRepository,
        classes: ClassRepository,
        users: UserRepository,
        teacher_departments: TeacherDepartmentRepository,
        settings: SettingsService,
        clock: Clock = now_local,
    ):
        self._lessons = lessons
        self._classes = classes
        self._users = users
        self._teacher_departments = teacher_departments
        self._settings = settings
        self._clock = clock

    # Validation

    def build_draft(
        self,
        *,
        subject: Any,
        class_id: Any,
        teacher_id: Any,
        day_of_week: Any,
        start_time_minutes: Any,
        duration_minutes: Any = None,
        lesson_count: Any = None,
        attendance_window_minutes: Any = None,
        location: Any = None,
        is_active: Any = True,
        allow_overnight: bool = False,
    ) -> LessonDraft:
        """Validate raw lesson fields; missing optional values fall back to system settings."""
        settings = self._settings.current()

        draft = LessonDraft(
            subject=require_non_empty(subject, "Subject", max_len=MAX_SUBJECT_LENGTH),
            class_id=require_positive_int(class_id, "Class"),
            teacher_id=require_positive_int(teacher_id, "Teacher"),
            day_of_week=require_int_range(day_of_week, "Day of week", minimum=0, maximum=6),
            start_time_minutes=require_int_range(
                start_time_minutes, "Start time", minimum=0, maximum=MINUTES_PER_DAY - 1
            ),
            duration_minutes=require_int_range(
                settings.default_lesson_duration if duration_minutes is None else duration_minutes,
                "Duration",
                minimum=MIN_DURATION_MINUTES,
                maximum=MAX_DURATION_MINUTES,
            ),
            lesson_count=require_int_range(
                MIN_LESSON_COUNT if lesson_count is None else lesson_count,
                "Lesson count",
                minimum=MIN_LESSON_COUNT,
                maximum=MAX_LESSON_COUNT,
            ),
            attendance_window_minutes=require_int_range(
                settings.default_attendance_window if attendance_window_minutes is None else attendance_window_minutes,
                "Attendance window",
                minimum=MIN_ATTENDANCE_WINDOW_MINUTES,
            ),
            location=optional_str(location),
            is_active=bool(is_active),
        )

        if not allow_overnight and draft.start_time_minutes + draft.duration_minutes > MINUTES_PER_DAY:
            raise ValidationError("Lesson must end before midnight")
        return draft

    def _check_references(self, draft: LessonDraft) -> None:
        if not self._classes.get_by_id(draft.class_id):
            raise NotFoundError("Class not found")
        teacher = self._users.get_by_id(draft.teacher_id)
        if not teacher or teacher.role == Role.STUDENT:
            raise NotFoundError("Teacher not found")

    def _check_duplicate(self, draft: LessonDraft, *, exclude_id: Optional[int] = None) -> None:
        if self._lessons.find_duplicate(draft, exclude_id=exclude_id):
            raise ValidationError(DUPLICATE_LESSON_MESSAGE)

    def _owned_teacher_id(self, actor: SessionUser, teacher_id: Any) -> Any:
        """Teachers always schedule for themselves."""
        require_staff(actor.role)
        return actor.user_id if actor.is_teacher else teacher_id

    def _get_or_404(self, lesson_id: int) -> Lesson:
        lesson = self._lessons.get_by_id(int(lesson_id))
        if not lesson:
            raise NotFoundError("Lesson not found")
        return lesson

    def _require_owner(self, actor: SessionUser, lesson_id: int, action: str) -> Lesson:
        require_staff(actor.role)
        lesson = self._lessons.get_by_id(int(lesson_id))
        if actor.is_teacher and (not lesson or lesson.teacher_id != actor.user_id):
            raise AuthorizationError(f"You can only {action} your own lessons")
        if not lesson:
            raise NotFoundError("Lesson not found")
        return lesson

    # Mutations

    def create(self, *, actor: SessionUser, **fields: Any) -> Lesson:
        fields["teacher_id"] = self._owned_teacher_id(actor, fields.get("teacher_id"))
        draft = self.build_draft(**fields)
        self._check_references(draft)
        self._check_duplicate(draft)

        lesson_id = self._lessons.create(draft)
        logger.info("Lesson %s created (%s, class %s)", lesson_id, draft.subject, draft.class_id)
        return self._get_or_404(lesson_id)

    def create_recurring(
        self,
        *,
        actor: SessionUser,
        days_of_week: Iterable[Any],
        number_of_weeks: Any,
        **fields: Any,
    ) -> list[Lesson]:
        """Create one weekly lesson per requested weekday.

        ``number_of_weeks`` is validated but a weekly lesson already repeats
        every week, so it does not multiply the rows.
        """
        if not days_of_week or isinstance(days_of_week, (str, bytes)) or not number_of_weeks:
            raise ValidationError("Invalid recurring pattern. Must include daysOfWeek array and numberOfWeeks.")
        require_positive_int(number_of_weeks, "Number of weeks")

        fields["teacher_id"] = self._owned_teacher_id(actor, fields.get("teacher_id"))
        fields.pop("day_of_week", None)

        drafts: list[LessonDraft] = []
        seen: set[int] = set()
        for day in days_of_week:
            draft = self.build_draft(day_of_week=day, **fields)
            if draft.day_of_week in seen:
                continue
            seen.add(draft.day_of_week)
            self._check_duplicate(draft)
            drafts.append(draft)

        self._check_references(drafts[0])
        created = [self._get_or_404(self._lessons.create(d)) for d in drafts]
        logger.info("Created %d recurring lessons for class %s", len(created), drafts[0].class_id)
        return created

    def create_instant(
        self,
        *,
        actor: SessionUser,
        subject: Any,
        class_id: Any,
        location: Any = None,
        duration_minutes: Any = None,
        attendance_window_minutes: Any = None,
    ) -> Lesson:
        """Create a lesson starting now; its attendance window opens immediately."""
        require_staff(actor.role)
        if not subject or not class_id:
            raise ValidationError("Subject and classId are required fields")

        school_class = self._classes.get_by_id(require_positive_int(class_id, "Class"))
        if not school_class:
            raise NotFoundError("Class not found")
        if actor.is_teacher:
            department_ids = {td.department_id for td in self._teacher_departments.list_for_teacher(actor.user_id)}
            if school_class.department_id not in department_ids:
                raise AuthorizationError("You can only create instant lessons for classes in your departments")

        now = self._clock().replace(second=0, microsecond=0)
        draft = self.build_draft(
            subject=subject,
            class_id=school_class.class_id,
            teacher_id=actor.user_id,
            day_of_week=sunday_based_weekday(now),
            start_time_minutes=minutes_since_midnight(now),
            duration_minutes=duration_minutes,
            attendance_window_minutes=attendance_window_minutes,
            location=optional_str(location) or DEFAULT_INSTANT_LOCATION,
            allow_overnight=True,
        )

        lesson_id = self._lessons.create(draft, created_at=now)
        logger.info("Instant lesson %s created by user %s for class %s", lesson_id, actor.user_id, draft.class_id)
        return self._get_or_404(lesson_id)

    def update(self, *, actor: SessionUser, lesson_id: int, **fields: Any) -> Lesson:
        current = self._require_owner(actor, lesson_id, "update")
        merged = {
            "subject": current.subject,
            "class_id": current.class_id,
            "teacher_id": current.teacher_id,
            "day_of_week": current.day_of_week,
            "start_time_minutes": current.start_time_minutes,
            "duration_minutes": current.duration_minutes,
            "lesson_count": current.lesson_count,
            "attendance_window_minutes": current.attendance_window_minutes,
            "location": current.location,
            "is_active": current.is_active,
        }
        merged.update({k: v for k, v in fields.items() if k in merged})
        if actor.is_teacher:
            merged["teacher_id"] = actor.user_id

        # Rows that already cross midnight (instant lessons) stay editable while their times are unchanged.
        same_times = (
            merged["start_time_minutes"] == current.start_time_minutes
            and merged["duration_minutes"] == current.duration_minutes
        )
        draft = self.build_draft(
            **merged,
            allow_overnight=same_times and current.end_time_minutes > MINUTES_PER_DAY,
        )
        self._check_references(draft)
        self._check_duplicate(draft, exclude_id=current.lesson_id)
        self._lessons.update(current.lesson_id, draft)
        return self._get_or_404(current.lesson_id)

    def delete(self, *, actor: SessionUser, lesson_id: int) -> None:
        lesson = self._require_owner(actor, lesson_id, "delete")
        if not self._lessons.delete(lesson.lesson_id):
            raise NotFoundError("Lesson not found")
        logger.info("Lesson %s deleted by user %s", lesson.lesson_id, actor.user_id)

    # Queries

    def get(self, *, actor: SessionUser, lesson_id: int) -> Lesson:
        lesson = self._get_or_404(lesson_id)
        if actor.is_teacher and lesson.teacher_id != actor.user_id:
            raise AuthorizationError("You can only view your own lessons")
        if actor.is_student:
            if not actor.class_id:
                raise AuthorizationError("You are not assigned to a class yet")
            if lesson.class_id != actor.class_id:
                raise AuthorizationError("You can only view lessons for your class")
        return lesson

    def todays_lessons(
        self,
        *,
        actor: SessionUser,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[Lesson]:
        today = sunday_based_weekday(self._clock())
        if actor.is_student:
            if not actor.class_id:
                return []
            return self._lessons.list_lessons(class_id=actor.class_id, day_of_week=today)
        if actor.is_teacher:
            return self._lessons.list_lessons(teacher_id=actor.user_id, day_of_week=today)
        return self._lessons.list_lessons(class_id=class_id, teacher_id=teacher_id, day_of_week=today)

    def list_lessons(
        self,
        *,
        actor: SessionUser,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[Lesson]:
        if actor.is_teacher and not teacher_id:
            return self._lessons.list_lessons(class_id=class_id, teacher_id=actor.user_id)
        if actor.is_student and not class_id:
            if not actor.class_id:
                return []
            return self._lessons.list_lessons(class_id=actor.class_id)
        return self._lessons.list_lessons(class_id=class_id, teacher_id=teacher_id)

    def lessons_for_student(self, *, actor: SessionUser, student_id: Optional[int] = None) -> Sequence[Lesson]:
        """Every lesson of a student's class (students: their own class)."""
        if actor.is_student:
            return self._lessons.list_lessons(class_id=actor.class_id) if actor.class_id else []
        if actor.is_teacher:
            return self._lessons.list_lessons(teacher_id=actor.user_id)
        if student_id:
            student = self._users.get_by_id(int(student_id))
            if student and student.class_id:
                return self._lessons.list_lessons(class_id=student.class_id)
        return self._lessons.list_lessons()

    def status_views(self, *, actor: SessionUser, today_only: bool = False) -> list[LessonStatusView]:
        now = self._clock()
        lessons = self.todays_lessons(actor=actor) if today_only else self.list_lessons(actor=actor)
        return [classify_lesson_status(lesson, now) for lesson in lessons]
