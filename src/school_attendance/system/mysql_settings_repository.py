from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import SystemSettings
from .repository import MaintenanceRepository, SettingsRepository

_FIELDS = (
    "default_attendance_window",
    "auto_disable_attendance",
    "allow_teacher_override",
    "email_notifications",
    "attendance_reminders",
    "low_attendance_alerts",
    "school_name",
    "default_lesson_duration",
    "default_lesson_gap",
)
_FLAGS = {
    "auto_disable_attendance",
    "allow_teacher_override",
    "email_notifications",
    "attendance_reminders",
    "low_attendance_alerts",
}


def _to_settings(r: dict) -> SystemSettings:
    values = {name: (bool(r[name]) if name in _FLAGS else r[name]) for name in _FIELDS}
    return SystemSettings(**values, updated_at=r.get("updated_at"))


def _params(settings: SystemSettings) -> tuple:
    fields = settings.as_fields()
    return tuple((1 if fields[name] else 0) if name in _FLAGS else fields[name] for name in _FIELDS)


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[SystemSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {', '.join(_FIELDS)}, updated_at FROM system_settings ORDER BY settings_id LIMIT 1")
            r = fetchone(cur)
            return _to_settings(r) if r else None

    def save(self, settings: SystemSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT settings_id FROM system_settings ORDER BY settings_id LIMIT 1")
            existing = fetchone(cur)
            if existing:
                assignments = ", ".join(f"{name}=%s" for name in _FIELDS)
                cur.execute(
                    f"UPDATE system_settings SET {assignments} WHERE settings_id=%s",
                    (*_params(settings), int(existing["settings_id"])),
                )
            else:
                placeholders = ",".join(["%s"] * len(_FIELDS))
                cur.execute(
                    f"INSERT INTO system_settings({', '.join(_FIELDS)}) VALUES({placeholders})",
                    _params(settings),
                )


class MySQLMaintenanceRepository(MaintenanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def clear_school_data(self, *, admin_password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            # Children before parents (FK order).
            cur.execute("DELETE FROM attendance")
            cur.execute("DELETE FROM lessons")
            cur.execute("DELETE FROM teacher_departments")
            cur.execute("DELETE FROM users WHERE role<>'admin'")
            cur.execute("UPDATE users SET department_id=NULL, level_id=NULL, class_id=NULL, password_hash=%s", (admin_password_hash,))
            cur.execute("DELETE FROM classes")
            cur.execute("DELETE FROM levels")
            cur.execute("DELETE FROM departments")
