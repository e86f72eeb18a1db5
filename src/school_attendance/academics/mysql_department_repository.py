from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_guard
from .model import Department
from .repository import DepartmentRepository


def _to_department(r: dict) -> Department:
    return Department(department_id=int(r["department_id"]), name=r["name"], created_at=r.get("created_at"))


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name, created_at FROM departments ORDER BY name")
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department_id, name, created_at FROM departments WHERE department_id=%s",
                (int(department_id),),
            )
            r = fetchone(cur)
            return _to_department(r) if r else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name, created_at FROM departments WHERE name=%s", (name,))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(name) VALUES(%s)", (name,))
            return int(cur.lastrowid)

    def update(self, department_id: int, *, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE departments SET name=%s WHERE department_id=%s", (name, int(department_id)))
            return cur.rowcount > 0

    def delete(self, department_id: int) -> bool:
        with integrity_guard("Department is still in use by classes"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE department_id=%s", (int(department_id),))
            return cur.rowcount > 0
