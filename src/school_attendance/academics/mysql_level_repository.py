from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_guard
from .model import Level
from .repository import LevelRepository

_COLUMNS = "level_id, number, name, created_at"


def _to_level(r: dict) -> Level:
    return Level(level_id=int(r["level_id"]), number=int(r["number"]), name=r["name"], created_at=r.get("created_at"))


class MySQLLevelRepository(LevelRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Level]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM levels ORDER BY number")
            return [_to_level(r) for r in fetchall(cur)]

    def get_by_id(self, level_id: int) -> Optional[Level]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM levels WHERE level_id=%s", (int(level_id),))
            r = fetchone(cur)
            return _to_level(r) if r else None

    def get_by_number(self, number: int) -> Optional[Level]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM levels WHERE number=%s", (int(number),))
            r = fetchone(cur)
            return _to_level(r) if r else None

    def create(self, *, number: int, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO levels(number, name) VALUES(%s,%s)", (int(number), name))
            return int(cur.lastrowid)

    def update(self, level_id: int, *, number: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE levels SET number=%s, name=%s WHERE level_id=%s", (int(number), name, int(level_id)))
            return cur.rowcount > 0

    def delete(self, level_id: int) -> bool:
        with integrity_guard("Level is still in use by classes"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM levels WHERE level_id=%s", (int(level_id),))
            return cur.rowcount > 0
