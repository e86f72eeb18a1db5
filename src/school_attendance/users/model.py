from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account (admin, teacher or student).

    Note: Plain data object, no DB access here.
    """

    user_id: int
    username: str
    password_hash: str
    full_name: str
    role: Role
    department_id: Optional[int] = None
    level_id: Optional[int] = None
    class_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        """Serializable view without the password hash."""
        return {
            "id": self.user_id,
            "username": self.username,
            "fullName": self.full_name,
            "role": self.role.value,
            "departmentId": self.department_id,
            "levelId": self.level_id,
            "classId": self.class_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class SessionUser:
    """The authenticated actor, as stored in the Flask session."""

    user_id: int
    full_name: str
    role: Role
    class_id: Optional[int] = None
    department_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "fullName": self.full_name,
            "role": self.role.value,
            "classId": self.class_id,
            "departmentId": self.department_id,
        }


@dataclass(frozen=True)
class TeacherDepartment:
    teacher_id: int
    department_id: int
    department_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "teacherId": self.teacher_id,
            "departmentId": self.department_id,
            "departmentName": self.department_name,
        }
