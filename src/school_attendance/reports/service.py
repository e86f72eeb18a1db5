from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..academics.repository import ClassRepository, DepartmentRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, now_local, sunday_based_weekday
from ..common.permissions import require_admin
from ..core.constants import (
    CLASS_STATS_MIN_RECORDS,
    DEFAULT_HISTORY_LIMIT,
    LOW_ATTENDANCE_MIN_RECORDS,
    LOW_ATTENDANCE_RATE,
    LOWEST_CLASSES_LIMIT,
)
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..lessons.repository import LessonRepository
from ..users.model import SessionUser
from ..users.repository import UserRepository


@dataclass(frozen=True)
class StudentReport:
    student: dict
    stats: dict
    records: list[dict]

    def to_dict(self) -> dict:
        return {"student": self.student, "stats": self.stats, "records": self.records}


class ReportService:
    """Read-only attendance statistics for dashboards and reports."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        lessons: LessonRepository,
        users: UserRepository,
        classes: ClassRepository,
        departments: DepartmentRepository,
        *,
        clock: Clock = now_local,
    ):
        self._attendance = attendance
        self._lessons = lessons
        self._users = users
        self._classes = classes
        self._departments = departments
        self._clock = clock

    def student_stats(self, student_id: int) -> dict:
        """Present/absent counts over recorded occurrences, plus the number of lessons of the class."""
        student = self._users.get_by_id(int(student_id))
        if not student or not student.class_id:
            return {"present": 0, "absent": 0, "total": 0, "presentPercentage": 0}

        total = len(self._lessons.list_lessons(class_id=student.class_id))
        tally = self._attendance.tally(student_id=student.user_id)
        return {
            "present": tally.present,
            "absent": tally.absent,
            "total": total,
            "presentPercentage": tally.rate,
        }

    def teacher_stats(self, teacher_id: int, *, class_id: Optional[int] = None) -> dict:
        lessons = self._lessons.list_lessons(teacher_id=int(teacher_id), class_id=class_id)
        if not lessons:
            return {
                "totalStudents": 0,
                "totalLessons": 0,
                "attendanceRate": 0,
                "presentCount": 0,
                "absentCount": 0,
                "lowAttendanceStudents": [],
            }

        lesson_ids = [l.lesson_id for l in lessons]
        tally = self._attendance.tally(lesson_ids=lesson_ids)

        class_ids = {l.class_id for l in lessons}
        total_students = sum(len(self._users.list_users(role=Role.STUDENT, class_id=c)) for c in class_ids)

        low: list[dict] = []
        for student_id, per_student in self._attendance.tally_by_student(lesson_ids).items():
            if per_student.total < LOW_ATTENDANCE_MIN_RECORDS or per_student.rate >= LOW_ATTENDANCE_RATE:
                continue
            student = self._users.get_by_id(student_id)
            if student:
                low.append(
                    {
                        "id": student.user_id,
                        "name": student.full_name,
                        "attendanceRate": per_student.rate,
                        "present": per_student.present,
                        "absent": per_student.absent,
                    }
                )
        low.sort(key=lambda x: x["attendanceRate"])

        return {
            "totalStudents": total_students,
            "totalLessons": len(lessons),
            "attendanceRate": tally.rate,
            "presentCount": tally.present,
            "absentCount": tally.absent,
            "lowAttendanceStudents": low,
        }

    def overall_stats(self) -> dict:
        tally = self._attendance.tally()
        today = sunday_based_weekday(self._clock())

        classes_with_stats: list[dict] = []
        for class_id, per_class in self._attendance.tally_by_class().items():
            if per_class.total < CLASS_STATS_MIN_RECORDS:
                continue
            school_class = self._classes.get_by_id(class_id)
            if school_class:
                classes_with_stats.append(
                    {
                        "id": school_class.class_id,
                        "name": school_class.name,
                        "attendanceRate": per_class.rate,
                        "present": per_class.present,
                        "absent": per_class.absent,
                    }
                )
        classes_with_stats.sort(key=lambda x: x["attendanceRate"])

        return {
            "totalStudents": self._users.count_by_role(Role.STUDENT),
            "totalLessons": self._lessons.count(),
            "todaysLessons": self._lessons.count(day_of_week=today),
            "attendanceRate": tally.rate,
            "presentCount": tally.present,
            "absentCount": tally.absent,
            "lowestAttendanceClasses": classes_with_stats[:LOWEST_CLASSES_LIMIT],
        }

    def stats_for(self, *, actor: SessionUser, class_id: Optional[int] = None) -> dict:
        """Stats appropriate for the actor's role."""
        if actor.is_student:
            return self.student_stats(actor.user_id)
        if actor.is_teacher:
            return self.teacher_stats(actor.user_id, class_id=class_id)
        return self.overall_stats()

    def admin_stats(self, *, current_role: Role) -> dict:
        require_admin(current_role)
        overall = self.overall_stats()
        return {
            "totalStudents": overall["totalStudents"],
            "totalTeachers": self._users.count_by_role(Role.TEACHER),
            "totalDepartments": len(self._departments.list_all()),
            "totalClasses": len(self._classes.list_all()),
            "totalLessons": overall["totalLessons"],
            "overallAttendanceRate": overall["attendanceRate"] / 100,
        }

    def student_report(self, *, current_role: Role, student_id: int) -> StudentReport:
        require_admin(current_role)
        student = self._users.get_by_id(int(student_id))
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")

        school_class = self._classes.get_by_id(student.class_id) if student.class_id else None
        department = self._departments.get_by_id(school_class.department_id) if school_class else None

        records = [
            {
                "id": row.attendance_id,
                "lessonId": row.lesson_id,
                "subject": row.subject,
                "date": row.occurrence_date.isoformat(),
                "status": row.status.value,
                "markedAt": row.marked_at.isoformat() if row.marked_at else None,
            }
            for row in self._attendance.history_for_student(student.user_id, limit=DEFAULT_HISTORY_LIMIT)
        ]

        return StudentReport(
            student={
                "id": student.user_id,
                "fullName": student.full_name,
                "username": student.username,
                "className": school_class.name if school_class else None,
                "departmentName": department.name if department else None,
            },
            stats=self.student_stats(student.user_id),
            records=records,
        )
