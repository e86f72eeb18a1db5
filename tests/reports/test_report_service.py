from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from conftest import (
    ADMIN_ID,
    HUMANITIES_CLASS_ID,
    OTHER_STUDENT_ID,
    OTHER_TEACHER_ID,
    SCIENCE_CLASS_ID,
    STUDENT_ID,
    TEACHER_ID,
    WEDNESDAY,
)
from school_attendance.core.enums import AttendanceStatus, Role
from school_attendance.core.exceptions import AuthorizationError, NotFoundError
from school_attendance.lessons.model import Lesson

P, A = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT


def _lesson(school, lesson_id, *, class_id=SCIENCE_CLASS_ID, teacher_id=TEACHER_ID, day_of_week=1):
    return school.lessons.add(
        Lesson(
            lesson_id=lesson_id,
            subject=f"Subject {lesson_id}",
            class_id=class_id,
            teacher_id=teacher_id,
            day_of_week=day_of_week,
            start_time_minutes=540,
        )
    )


def _mark(school, lesson_id, student_id, statuses):
    start = date(2024, 9, 2)
    for week, status in enumerate(statuses):
        day = start + timedelta(weeks=week)
        school.attendance.upsert(
            lesson_id=lesson_id,
            student_id=student_id,
            occurrence_date=day,
            status=status,
            marked_at=datetime.combine(day, datetime.min.time()),
        )


def test_student_stats_against_class_lessons(school):
    _lesson(school, 1)
    _lesson(school, 2, day_of_week=2)
    _lesson(school, 3, day_of_week=4)
    _lesson(school, 4)
    _mark(school, 1, STUDENT_ID, [P])
    _mark(school, 2, STUDENT_ID, [A])

    stats = school.container.report_service.stats_for(actor=school.actor(STUDENT_ID))

    assert stats == {"present": 1, "absent": 1, "total": 4, "presentPercentage": 50.0}


def test_student_without_class_gets_zeros(school):
    school.users.update_user(STUDENT_ID, class_id=None)
    stats = school.container.report_service.student_stats(STUDENT_ID)
    assert stats["total"] == 0
    assert stats["presentPercentage"] == 0


def test_teacher_stats_flags_low_attendance(school):
    _lesson(school, 1)
    _lesson(school, 2, class_id=HUMANITIES_CLASS_ID, day_of_week=2)
    _mark(school, 1, STUDENT_ID, [P, A, A, A])
    _mark(school, 2, OTHER_STUDENT_ID, [A, A])

    stats = school.container.report_service.stats_for(actor=school.actor(TEACHER_ID))

    assert stats["totalLessons"] == 2
    assert stats["totalStudents"] == 2
    assert stats["presentCount"] == 1
    assert stats["absentCount"] == 5
    # the second student has too few records to be flagged
    assert [s["id"] for s in stats["lowAttendanceStudents"]] == [STUDENT_ID]
    assert stats["lowAttendanceStudents"][0]["attendanceRate"] == 25.0


def test_teacher_without_lessons(school):
    stats = school.container.report_service.teacher_stats(OTHER_TEACHER_ID)
    assert stats["totalLessons"] == 0
    assert stats["lowAttendanceStudents"] == []


def test_overall_stats_lists_lowest_classes_with_enough_records(school):
    _lesson(school, 1, day_of_week=WEDNESDAY)
    _lesson(school, 2, class_id=HUMANITIES_CLASS_ID, teacher_id=OTHER_TEACHER_ID)
    _mark(school, 1, STUDENT_ID, [P] * 8 + [A] * 2)
    _mark(school, 2, OTHER_STUDENT_ID, [A] * 9)

    stats = school.container.report_service.stats_for(actor=school.actor(ADMIN_ID))

    assert stats["totalStudents"] == 2
    assert stats["todaysLessons"] == 1
    assert [c["id"] for c in stats["lowestAttendanceClasses"]] == [SCIENCE_CLASS_ID]
    assert stats["lowestAttendanceClasses"][0]["attendanceRate"] == 80.0


def test_admin_dashboard_counters(school):
    _lesson(school, 1)
    _mark(school, 1, STUDENT_ID, [P, A])

    stats = school.container.report_service.admin_stats(current_role=Role.ADMIN)

    assert stats == {
        "totalStudents": 2,
        "totalTeachers": 2,
        "totalDepartments": 2,
        "totalClasses": 2,
        "totalLessons": 1,
        "overallAttendanceRate": 0.5,
    }
    with pytest.raises(AuthorizationError):
        school.container.report_service.admin_stats(current_role=Role.TEACHER)


def test_student_report(school):
    _lesson(school, 1)
    _mark(school, 1, STUDENT_ID, [P, A])
    svc = school.container.report_service

    report = svc.student_report(current_role=Role.ADMIN, student_id=STUDENT_ID).to_dict()

    assert report["student"]["className"] == "Science 1A"
    assert report["student"]["departmentName"] == "Science"
    assert [r["date"] for r in report["records"]] == ["2024-09-09", "2024-09-02"]
    assert report["stats"]["present"] == 1

    with pytest.raises(NotFoundError):
        svc.student_report(current_role=Role.ADMIN, student_id=TEACHER_ID)


def test_student_percentage_counts_each_weekly_occurrence(school):
    _lesson(school, 10)
    _mark(school, 10, STUDENT_ID, [P, P, P])

    stats = school.container.report_service.student_stats(STUDENT_ID)

    assert stats["present"] == 3
    assert stats["total"] == 1
    assert stats["presentPercentage"] == 100.0

    _mark(school, 10, STUDENT_ID, [P, P, P, A])
    assert school.container.report_service.student_stats(STUDENT_ID)["presentPercentage"] == 75.0
