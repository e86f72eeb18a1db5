from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..academics.repository import ClassRepository, DepartmentRepository
from ..common.permissions import require_admin, require_role
from ..common.validators import (
    require_min_length,
    require_non_empty,
    require_positive_int,
    require_student_password,
    require_username,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..lessons.repository import LessonRepository
from .model import SessionUser, TeacherDepartment, User
from .repository import TeacherDepartmentRepository, UserRepository

logger = logging.getLogger(__name__)


def _to_session_user(user: User) -> SessionUser:
    return SessionUser(
        user_id=user.user_id,
        full_name=user.full_name,
        role=user.role,
        class_id=user.class_id,
        department_id=user.department_id,
    )


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for username=%s", user.username)
            raise AuthenticationError("Invalid username or password")

        return _to_session_user(user)

    def session_user(self, user_id: int) -> Optional[SessionUser]:
        """Reload the actor for a request; None when the account is gone."""
        user = self._users.get_by_id(int(user_id))
        if not user:
            return None
        return _to_session_user(user)


class UserService:
    """Use cases: manage teachers and students."""

    def __init__(
        self,
        users: UserRepository,
        teacher_departments: TeacherDepartmentRepository,
        classes: ClassRepository,
        departments: DepartmentRepository,
        lessons: Optional[LessonRepository] = None,
    ):
        self._users = users
        self._teacher_departments = teacher_departments
        self._classes = classes
        self._departments = departments
        self._lessons = lessons

    def _get_with_role(self, user_id: int, role: Role) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user or user.role != role:
            raise NotFoundError(f"{role.value.capitalize()} not found")
        return user

    def _ensure_username_free(self, username: str, *, user_id: Optional[int] = None) -> None:
        existing = self._users.get_by_username(username)
        if existing and existing.user_id != user_id:
            raise ValidationError("Username already exists")

    def _department_name(self, department_id: Optional[int]) -> Optional[str]:
        if not department_id:
            return None
        department = self._departments.get_by_id(department_id)
        return department.name if department else None

    # Teachers

    def list_teachers(self, *, current_role: Role) -> Sequence[User]:
        require_admin(current_role)
        return self._users.list_users(role=Role.TEACHER)

    def list_staff_view(self, *, current_role: Role) -> list[dict]:
        """Teachers and admins with their primary department name."""
        require_admin(current_role)
        out: list[dict] = []
        for role in (Role.ADMIN, Role.TEACHER):
            for user in self._users.list_users(role=role):
                row = user.to_public_dict()
                row["departmentName"] = self._department_name(user.department_id)
                out.append(row)
        return out

    def get_teacher(self, *, current_role: Role, teacher_id: int) -> User:
        require_admin(current_role)
        return self._get_with_role(teacher_id, Role.TEACHER)

    def create_teacher(
        self,
        *,
        current_role: Role,
        full_name: str,
        username: str,
        password: str,
        department_id: Optional[int] = None,
    ) -> User:
        require_admin(current_role)
        full_name = require_non_empty(full_name, "Full name", max_len=100)
        username = require_username(username)
        require_min_length(password, "Password", 6)
        self._ensure_username_free(username)

        if department_id:
            department_id = require_positive_int(department_id, "Department")
            if not self._departments.get_by_id(department_id):
                raise NotFoundError("Department not found")

        teacher_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=Role.TEACHER,
            department_id=department_id or None,
        )
        if department_id:
            self._teacher_departments.add(teacher_id=teacher_id, department_id=department_id)
        return self._get_with_role(teacher_id, Role.TEACHER)

    def update_teacher(
        self,
        *,
        current_role: Role,
        teacher_id: int,
        full_name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        department_id: Optional[int] = None,
    ) -> User:
        require_admin(current_role)
        self._get_with_role(teacher_id, Role.TEACHER)

        changes: dict = {}
        if full_name is not None:
            changes["full_name"] = require_non_empty(full_name, "Full name", max_len=100)
        if username is not None:
            changes["username"] = require_username(username)
            self._ensure_username_free(changes["username"], user_id=int(teacher_id))
        if password:
            require_min_length(password, "Password", 6)
            changes["password_hash"] = generate_password_hash(password)
        if department_id is not None:
            changes["department_id"] = require_positive_int(department_id, "Department")

        if changes:
            self._users.update_user(int(teacher_id), **changes)
        return self._get_with_role(teacher_id, Role.TEACHER)

    def delete_teacher(self, *, current_role: Role, teacher_id: int) -> None:
        require_admin(current_role)
        self._get_with_role(teacher_id, Role.TEACHER)
        if not self._users.delete_by_id(int(teacher_id)):
            raise NotFoundError("Teacher not found")

    # Teacher <-> department links

    def teacher_department_ids(self, teacher_id: int) -> set[int]:
        return {td.department_id for td in self._teacher_departments.list_for_teacher(int(teacher_id))}

    def list_teacher_departments(self, *, actor: SessionUser, teacher_id: int) -> Sequence[TeacherDepartment]:
        if not actor.is_admin and actor.user_id != int(teacher_id):
            raise AuthorizationError("Unauthorized")
        return self._teacher_departments.list_for_teacher(int(teacher_id))

    def assign_teacher_department(self, *, current_role: Role, teacher_id: int, department_id: int) -> TeacherDepartment:
        require_admin(current_role)
        department_id = require_positive_int(department_id, "Department ID")
        self._get_with_role(teacher_id, Role.TEACHER)
        department = self._departments.get_by_id(department_id)
        if not department:
            raise NotFoundError("Department not found")

        self._teacher_departments.add(teacher_id=int(teacher_id), department_id=department_id)
        return TeacherDepartment(teacher_id=int(teacher_id), department_id=department_id, department_name=department.name)

    def remove_teacher_department(self, *, current_role: Role, teacher_id: int, department_id: int) -> None:
        require_admin(current_role)
        if not self._teacher_departments.remove(teacher_id=int(teacher_id), department_id=int(department_id)):
            raise NotFoundError("Teacher-department relationship not found")

    def list_department_teachers(self, department_id: int) -> Sequence[User]:
        if not self._departments.get_by_id(int(department_id)):
            raise NotFoundError("Department not found")
        return self._teacher_departments.list_teachers(int(department_id))

    # Students

    def _student_view(self, student: User) -> dict:
        row = student.to_public_dict()
        school_class = self._classes.get_by_id(student.class_id) if student.class_id else None
        row["className"] = school_class.name if school_class else None
        row["departmentName"] = self._department_name(school_class.department_id) if school_class else None
        return row

    def _class_links(self, class_id: int) -> dict:
        school_class = self._classes.get_by_id(require_positive_int(class_id, "Class"))
        if not school_class:
            raise NotFoundError("Class not found")
        return {
            "class_id": school_class.class_id,
            "department_id": school_class.department_id,
            "level_id": school_class.level_id,
        }

    def get_student(self, student_id: int) -> User:
        return self._get_with_role(student_id, Role.STUDENT)

    def get_student_view(self, *, current_role: Role, student_id: int) -> dict:
        require_admin(current_role)
        return self._student_view(self.get_student(student_id))

    def list_students_view(self, *, actor: SessionUser, class_id: Optional[int] = None) -> list[dict]:
        if actor.is_teacher and class_id:
            if self._lessons is None or not self._lessons.list_lessons(class_id=int(class_id), teacher_id=actor.user_id):
                raise AuthorizationError("You are not teaching any lessons in this class")
        students = self._users.list_users(role=Role.STUDENT, class_id=int(class_id) if class_id else None)
        return [self._student_view(s) for s in students]

    def create_student(
        self,
        *,
        current_role: Role,
        full_name: str,
        username: str,
        password: str,
        class_id: Optional[int] = None,
    ) -> User:
        require_admin(current_role)
        return self._create_student(full_name=full_name, username=username, password=password, class_id=class_id)

    def _create_student(self, *, full_name: str, username: str, password: str, class_id: Optional[int]) -> User:
        full_name = require_non_empty(full_name, "Full name", max_len=100)
        username = require_username(username, "Admission number")
        require_student_password(password)
        self._ensure_username_free(username)
        links = self._class_links(class_id) if class_id else {}

        student_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=Role.STUDENT,
            **links,
        )
        return self.get_student(student_id)

    def update_student(
        self,
        *,
        current_role: Role,
        student_id: int,
        full_name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        class_id: Optional[int] = None,
    ) -> User:
        require_admin(current_role)
        self.get_student(student_id)

        changes: dict = {}
        if full_name is not None:
            changes["full_name"] = require_non_empty(full_name, "Full name", max_len=100)
        if username is not None:
            changes["username"] = require_username(username, "Admission number")
            self._ensure_username_free(changes["username"], user_id=int(student_id))
        if password:
            changes["password_hash"] = generate_password_hash(require_student_password(password))
        if class_id is not None:
            changes.update(self._class_links(class_id))

        if changes:
            self._users.update_user(int(student_id), **changes)
        return self.get_student(student_id)

    def delete_student(self, *, current_role: Role, student_id: int) -> None:
        require_admin(current_role)
        self.get_student(student_id)
        if not self._users.delete_by_id(int(student_id)):
            raise NotFoundError("Student not found")

    def _require_teacher_manages(self, actor: SessionUser, department_id: int) -> None:
        require_role(actor.role, Role.TEACHER, Role.ADMIN)
        if actor.is_teacher and department_id not in self.teacher_department_ids(actor.user_id):
            raise AuthorizationError("You can only manage students for classes in your departments")

    def register_student(self, *, actor: SessionUser, student_id: int, class_id: int) -> User:
        """Teacher assigns a student to a class of one of the teacher's departments."""
        student_id = require_positive_int(student_id, "Student ID")
        links = self._class_links(class_id)
        self._require_teacher_manages(actor, links["department_id"])
        self.get_student(student_id)

        self._users.update_user(int(student_id), **links)
        logger.info("Student %s registered to class %s by user %s", student_id, class_id, actor.user_id)
        return self.get_student(student_id)

    def deregister_student(self, *, actor: SessionUser, student_id: int) -> User:
        student_id = require_positive_int(student_id, "Student ID")
        student = self.get_student(student_id)
        if not student.class_id:
            raise ValidationError("Student is not registered to any class")
        school_class = self._classes.get_by_id(student.class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        self._require_teacher_manages(actor, school_class.department_id)

        self._users.update_user(int(student_id), class_id=None, department_id=None, level_id=None)
        logger.info("Student %s removed from class %s by user %s", student_id, student.class_id, actor.user_id)
        return self.get_student(student_id)

    def self_register(self, *, full_name: str, username: str, password: str, class_id: Any) -> User:
        """Public sign-up; always creates a student account attached to a class."""
        if not class_id:
            raise ValidationError("Student registration requires department, level, and class selection")
        student = self._create_student(
            full_name=full_name,
            username=username,
            password=password,
            class_id=class_id,
        )
        logger.info("Student self-registered: %s", student.username)
        return student

    def student_counts_by_class(self) -> dict[int, int]:
        return dict(Counter(s.class_id for s in self._users.list_users(role=Role.STUDENT) if s.class_id))
