from __future__ import annotations

import re
from datetime import date, datetime

from school_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from school_attendance.core.enums import AttendanceStatus
from school_attendance.database.bootstrap import SCHEMA_PATH


class RecordingCursor:
    def __init__(self, row: dict):
        self.row = row
        self.executed: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), tuple(params)))

    def fetchone(self):
        return self.row

    def close(self):
        pass


class RecordingConnection:
    def __init__(self, cursor: RecordingCursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, conn: RecordingConnection):
        self.conn = conn

    def connect(self, *, with_database: bool = True):
        return self.conn


def test_upsert_is_a_single_atomic_statement_keyed_by_occurrence():
    occurrence = date(2025, 1, 15)
    marked_at = datetime(2025, 1, 15, 9, 15)
    cursor = RecordingCursor(
        {
            "attendance_id": 7,
            "lesson_id": 10,
            "student_id": 4,
            "occurrence_date": occurrence,
            "status": "present",
            "marked_at": marked_at,
            "created_at": marked_at,
        }
    )
    conn = RecordingConnection(cursor)
    repo = MySQLAttendanceRepository(FakeConnectionFactory(conn))

    record = repo.upsert(
        lesson_id=10,
        student_id=4,
        occurrence_date=occurrence,
        status=AttendanceStatus.PRESENT,
        marked_at=marked_at,
    )

    inserts = [(sql, p) for sql, p in cursor.executed if sql.startswith("INSERT")]
    assert len(inserts) == 1
    insert_sql, insert_params = inserts[0]
    assert "ON DUPLICATE KEY UPDATE" in insert_sql
    assert insert_params == (10, 4, occurrence, "present", marked_at)

    # no read-before-write: the insert comes first
    assert cursor.executed[0][0].startswith("INSERT")
    select_sql, select_params = cursor.executed[1]
    assert select_sql.startswith("SELECT")
    assert "WHERE lesson_id=%s AND student_id=%s AND occurrence_date=%s" in select_sql
    assert select_params == (10, 4, occurrence)

    assert conn.commits == 1 and conn.rollbacks == 0
    assert (record.attendance_id, record.status) == (7, AttendanceStatus.PRESENT)


def test_schema_declares_one_row_per_occurrence():
    schema = SCHEMA_PATH.read_text(encoding="utf-8")

    assert re.search(
        r"UNIQUE KEY \w+ \(lesson_id, student_id, occurrence_date\)",
        schema,
    )
