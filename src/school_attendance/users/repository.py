from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import TeacherDepartment, User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None, class_id: Optional[int] = None) -> Sequence[User]:
        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        full_name: str,
        role: Role,
        department_id: Optional[int] = None,
        level_id: Optional[int] = None,
        class_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update_user(self, user_id: int, **fields) -> bool:
        """Update the given columns only (username, password_hash, full_name, *_id)."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError


class TeacherDepartmentRepository(Protocol):
    def list_for_teacher(self, teacher_id: int) -> Sequence[TeacherDepartment]:
        raise NotImplementedError

    def list_teachers(self, department_id: int) -> Sequence[User]:
        raise NotImplementedError

    def add(self, *, teacher_id: int, department_id: int) -> bool:
        """Link teacher to department; False when the link already existed."""

        raise NotImplementedError

    def remove(self, *, teacher_id: int, department_id: int) -> bool:
        raise NotImplementedError
