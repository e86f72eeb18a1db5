from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from fakes import (
    InMemoryAttendance,
    InMemoryClasses,
    InMemoryDepartments,
    InMemoryLessons,
    InMemoryLevels,
    InMemoryMaintenance,
    InMemorySettings,
    InMemoryTeacherDepartments,
    InMemoryUsers,
)
from school_attendance.container import Container, build_services
from school_attendance.core.enums import Role
from school_attendance.users.model import SessionUser, User

# Wednesday (day_of_week 3 with Sunday = 0)
NOW = datetime(2025, 1, 15, 9, 15)
WEDNESDAY = 3

ADMIN_ID, TEACHER_ID, OTHER_TEACHER_ID, STUDENT_ID, OTHER_STUDENT_ID = 1, 2, 3, 4, 5
SCIENCE_ID, HUMANITIES_ID = 1, 2
SCIENCE_CLASS_ID, HUMANITIES_CLASS_ID = 1, 2

PASSWORDS = {"admin": "admin123", "teacher": "teacher123", "student": "student123"}


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@dataclass
class School:
    clock: FixedClock
    users: InMemoryUsers
    departments: InMemoryDepartments
    levels: InMemoryLevels
    classes: InMemoryClasses
    teacher_departments: InMemoryTeacherDepartments
    lessons: InMemoryLessons
    attendance: InMemoryAttendance
    settings: InMemorySettings
    container: Container

    def actor(self, user_id: int) -> SessionUser:
        return self.container.auth_service.session_user(user_id)


def _user(user_id, username, role, *, full_name, department_id=None, level_id=None, class_id=None, password=None):
    return User(
        user_id=user_id,
        username=username,
        password_hash=generate_password_hash(password or PASSWORDS[role.value]),
        full_name=full_name,
        role=role,
        department_id=department_id,
        level_id=level_id,
        class_id=class_id,
    )


@pytest.fixture
def school() -> School:
    clock = FixedClock(NOW)
    departments = InMemoryDepartments()
    levels = InMemoryLevels()
    classes = InMemoryClasses()
    users = InMemoryUsers()
    teacher_departments = InMemoryTeacherDepartments(departments, users)
    lessons = InMemoryLessons()
    attendance = InMemoryAttendance(lessons, users, classes)
    settings = InMemorySettings()
    maintenance = InMemoryMaintenance(users, teacher_departments, departments, levels, classes, lessons, attendance)

    departments.create(name="Science")
    departments.create(name="Humanities")
    levels.create(number=1, name="Level 1")
    classes.create(name="Science 1A", department_id=SCIENCE_ID, level_id=1, academic_year="2024/2025")
    classes.create(name="Humanities 1B", department_id=HUMANITIES_ID, level_id=1, academic_year="2024/2025")

    users.add(_user(ADMIN_ID, "admin", Role.ADMIN, full_name="Ada Admin"))
    users.add(_user(TEACHER_ID, "teacher", Role.TEACHER, full_name="Tom Teacher", department_id=SCIENCE_ID))
    users.add(_user(OTHER_TEACHER_ID, "teacher2", Role.TEACHER, full_name="Tara Teacher", password="teacher123"))
    users.add(
        _user(
            STUDENT_ID,
            "student",
            Role.STUDENT,
            full_name="Sam Student",
            department_id=SCIENCE_ID,
            level_id=1,
            class_id=SCIENCE_CLASS_ID,
        )
    )
    users.add(
        _user(
            OTHER_STUDENT_ID,
            "student2",
            Role.STUDENT,
            full_name="Sue Student",
            department_id=HUMANITIES_ID,
            level_id=1,
            class_id=HUMANITIES_CLASS_ID,
            password="student123",
        )
    )
    teacher_departments.add(teacher_id=TEACHER_ID, department_id=SCIENCE_ID)

    container = build_services(
        users_repo=users,
        teacher_departments_repo=teacher_departments,
        departments_repo=departments,
        levels_repo=levels,
        classes_repo=classes,
        lessons_repo=lessons,
        attendance_repo=attendance,
        settings_repo=settings,
        maintenance_repo=maintenance,
        clock=clock,
    )

    return School(
        clock=clock,
        users=users,
        departments=departments,
        levels=levels,
        classes=classes,
        teacher_departments=teacher_departments,
        lessons=lessons,
        attendance=attendance,
        settings=settings,
        container=container,
    )


@pytest.fixture
def app(school, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from school_attendance.main import create_app

    return create_app(container=school.container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(username: str, password: str | None = None):
        role = "student" if username.startswith("student") else "teacher" if username.startswith("teacher") else "admin"
        resp = client.post("/api/login", json={"username": username, "password": password or PASSWORDS[role]})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login
