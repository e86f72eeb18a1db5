from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import AttendanceHistoryRow, AttendanceRecord, AttendanceTally, RecentAttendanceRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, lesson_id, student_id, occurrence_date, status, marked_at, created_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        lesson_id=int(r["lesson_id"]),
        student_id=int(r["student_id"]),
        occurrence_date=r["occurrence_date"],
        status=AttendanceStatus(r["status"]),
        marked_at=r.get("marked_at"),
        created_at=r.get("created_at"),
    )


def _in_clause(column: str, values: Sequence[int]) -> str:
    return f"{column} IN ({','.join(['%s'] * len(values))})"


def _tally_rows(rows: list[dict], key: str) -> dict[int, AttendanceTally]:
    counts: dict[int, dict[str, int]] = defaultdict(lambda: {"present": 0, "absent": 0})
    for r in rows:
        counts[int(r[key])][r["status"]] = int(r["n"])
    return {k: AttendanceTally(present=v["present"], absent=v["absent"]) for k, v in counts.items()}


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        lesson_id: int,
        student_id: int,
        occurrence_date: date,
        status: AttendanceStatus,
        marked_at: datetime,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(lesson_id, student_id, occurrence_date, status, marked_at)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), marked_at=VALUES(marked_at)
                """,
                (int(lesson_id), int(student_id), occurrence_date, status.value, marked_at),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE lesson_id=%s AND student_id=%s AND occurrence_date=%s
                """,
                (int(lesson_id), int(student_id), occurrence_date),
            )
            return _to_record(fetchone(cur))

    def list_records(
        self,
        *,
        lesson_ids: Optional[Sequence[int]] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        if lesson_ids is not None and not lesson_ids:
            return []

        clauses: list[str] = []
        params: list[object] = []
        if lesson_ids is not None:
            clauses.append(_in_clause("lesson_id", lesson_ids))
            params.extend(int(i) for i in lesson_ids)
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance {where_clause(clauses)} ORDER BY occurrence_date DESC, attendance_id",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def history_for_student(self, student_id: int, *, limit: int) -> Sequence[AttendanceHistoryRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    a.attendance_id, a.lesson_id, l.subject, l.day_of_week, l.start_time_minutes,
                    l.duration_minutes, l.location, a.occurrence_date, a.status, a.marked_at
                FROM attendance a
                JOIN lessons l ON l.lesson_id = a.lesson_id
                WHERE a.student_id=%s
                ORDER BY a.occurrence_date DESC, l.start_time_minutes DESC
                LIMIT %s
                """,
                (int(student_id), int(limit)),
            )
            return [
                AttendanceHistoryRow(
                    attendance_id=int(r["attendance_id"]),
                    lesson_id=int(r["lesson_id"]),
                    subject=r["subject"],
                    day_of_week=int(r["day_of_week"]),
                    start_time_minutes=int(r["start_time_minutes"]),
                    duration_minutes=int(r["duration_minutes"]),
                    location=r.get("location"),
                    occurrence_date=r["occurrence_date"],
                    status=AttendanceStatus(r["status"]),
                    marked_at=r.get("marked_at"),
                )
                for r in fetchall(cur)
            ]

    def recent(self, *, limit: int) -> Sequence[RecentAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    a.attendance_id, a.student_id, u.full_name, a.lesson_id, l.subject,
                    c.name AS class_name, a.status, a.marked_at
                FROM attendance a
                JOIN users u ON u.user_id = a.student_id
                JOIN lessons l ON l.lesson_id = a.lesson_id
                LEFT JOIN classes c ON c.class_id = l.class_id
                ORDER BY a.marked_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                RecentAttendanceRow(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    student_name=r["full_name"],
                    lesson_id=int(r["lesson_id"]),
                    subject=r["subject"],
                    class_name=r.get("class_name"),
                    status=AttendanceStatus(r["status"]),
                    marked_at=r.get("marked_at"),
                )
                for r in fetchall(cur)
            ]

    def tally(
        self,
        *,
        student_id: Optional[int] = None,
        lesson_ids: Optional[Sequence[int]] = None,
    ) -> AttendanceTally:
        if lesson_ids is not None and not lesson_ids:
            return AttendanceTally()

        clauses: list[str] = []
        params: list[object] = []
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))
        if lesson_ids is not None:
            clauses.append(_in_clause("lesson_id", lesson_ids))
            params.extend(int(i) for i in lesson_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS n FROM attendance {where_clause(clauses)} GROUP BY status",
                tuple(params),
            )
            counts = {r["status"]: int(r["n"]) for r in fetchall(cur)}
            return AttendanceTally(present=counts.get("present", 0), absent=counts.get("absent", 0))

    def tally_by_student(self, lesson_ids: Sequence[int]) -> dict[int, AttendanceTally]:
        if not lesson_ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, status, COUNT(*) AS n
                FROM attendance
                WHERE {_in_clause("lesson_id", lesson_ids)}
                GROUP BY student_id, status
                """,
                tuple(int(i) for i in lesson_ids),
            )
            return _tally_rows(fetchall(cur), "student_id")

    def tally_by_class(self) -> dict[int, AttendanceTally]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT l.class_id, a.status, COUNT(*) AS n
                FROM attendance a
                JOIN lessons l ON l.lesson_id = a.lesson_id
                GROUP BY l.class_id, a.status
                """
            )
            return _tally_rows(fetchall(cur), "class_id")
