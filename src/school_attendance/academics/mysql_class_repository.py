from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_guard, where_clause
from .model import SchoolClass
from .repository import ClassRepository

_COLUMNS = "class_id, name, department_id, level_id, academic_year, created_at"


def _to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["class_id"]),
        name=r["name"],
        department_id=int(r["department_id"]),
        level_id=int(r["level_id"]),
        academic_year=r.get("academic_year"),
        created_at=r.get("created_at"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, department_id: Optional[int] = None, level_id: Optional[int] = None) -> Sequence[SchoolClass]:
        clauses: list[str] = []
        params: list[object] = []
        if department_id is not None:
            clauses.append("department_id=%s")
            params.append(int(department_id))
        if level_id is not None:
            clauses.append("level_id=%s")
            params.append(int(level_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes {where_clause(clauses)} ORDER BY name", tuple(params))
            return [_to_class(r) for r in fetchall(cur)]

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def create(self, *, name: str, department_id: int, level_id: int, academic_year: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(name, department_id, level_id, academic_year) VALUES(%s,%s,%s,%s)",
                (name, int(department_id), int(level_id), academic_year),
            )
            return int(cur.lastrowid)

    def update(
        self,
        class_id: int,
        *,
        name: str,
        department_id: int,
        level_id: int,
        academic_year: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE classes
                SET name=%s, department_id=%s, level_id=%s, academic_year=%s
                WHERE class_id=%s
                """,
                (name, int(department_id), int(level_id), academic_year, int(class_id)),
            )
            return cur.rowcount > 0

    def delete(self, class_id: int) -> bool:
        with integrity_guard("Class still has lessons"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE class_id=%s", (int(class_id),))
            return cur.rowcount > 0
