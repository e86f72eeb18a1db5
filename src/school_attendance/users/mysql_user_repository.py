from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int, where_clause
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, username, password_hash, full_name, role, department_id, level_id, class_id, created_at"
_UPDATABLE = ("username", "password_hash", "full_name", "department_id", "level_id", "class_id")


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        full_name=row["full_name"],
        role=Role(row["role"]),
        department_id=optional_int(row.get("department_id")),
        level_id=optional_int(row.get("level_id")),
        class_id=optional_int(row.get("class_id")),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_users(self, *, role: Optional[Role] = None, class_id: Optional[int] = None) -> Sequence[User]:
        clauses: list[str] = []
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(int(class_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users {where_clause(clauses)} ORDER BY full_name", tuple(params))
            return [_to_user(r) for r in fetchall(cur)]

    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE role=%s", (role.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, password_hash, full_name, role, department_id, level_id, class_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (username, password_hash, full_name, role.value, department_id, level_id, class_id),
            )
            return int(cur.lastrowid)

    def update_user(self, user_id: int, **fields) -> bool:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Unsupported user fields: {sorted(unknown)}")
        if not fields:
            return False

        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                (*fields.values(), int(user_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
