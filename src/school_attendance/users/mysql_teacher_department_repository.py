from __future__ import annotations

from typing import Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import TeacherDepartment, User
from .repository import TeacherDepartmentRepository


class MySQLTeacherDepartmentRepository(TeacherDepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_teacher(self, teacher_id: int) -> Sequence[TeacherDepartment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT td.teacher_id, td.department_id, d.name AS department_name
                FROM teacher_departments td
                JOIN departments d ON d.department_id = td.department_id
                WHERE td.teacher_id=%s
                ORDER BY d.name
                """,
                (int(teacher_id),),
            )
            return [
                TeacherDepartment(
                    teacher_id=int(r["teacher_id"]),
                    department_id=int(r["department_id"]),
                    department_name=r.get("department_name"),
                )
                for r in fetchall(cur)
            ]

    def list_teachers(self, department_id: int) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.username, u.full_name, u.department_id, u.created_at
                FROM teacher_departments td
                JOIN users u ON u.user_id = td.teacher_id
                WHERE td.department_id=%s AND u.role=%s
                ORDER BY u.full_name
                """,
                (int(department_id), Role.TEACHER.value),
            )
            return [
                User(
                    user_id=int(r["user_id"]),
                    username=r["username"],
                    password_hash="",
                    full_name=r["full_name"],
                    role=Role.TEACHER,
                    department_id=r.get("department_id"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def add(self, *, teacher_id: int, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO teacher_departments(teacher_id, department_id) VALUES(%s,%s)",
                (int(teacher_id), int(department_id)),
            )
            return cur.rowcount > 0

    def remove(self, *, teacher_id: int, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM teacher_departments WHERE teacher_id=%s AND department_id=%s",
                (int(teacher_id), int(department_id)),
            )
            return cur.rowcount > 0
