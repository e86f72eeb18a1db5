from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Lesson, LessonDraft
from .repository import LessonRepository

_COLUMNS = (
    "lesson_id, subject, class_id, teacher_id, day_of_week, start_time_minutes, duration_minutes, "
    "lesson_count, attendance_window_minutes, location, is_active, created_at"
)


def _to_lesson(r: dict) -> Lesson:
    return Lesson(
        lesson_id=int(r["lesson_id"]),
        subject=r["subject"],
        class_id=int(r["class_id"]),
        teacher_id=int(r["teacher_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time_minutes=int(r["start_time_minutes"]),
        duration_minutes=int(r["duration_minutes"]),
        lesson_count=int(r["lesson_count"]),
        attendance_window_minutes=int(r["attendance_window_minutes"]),
        location=r.get("location"),
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


def _draft_params(draft: LessonDraft) -> tuple:
    return (
        draft.subject,
        int(draft.class_id),
        int(draft.teacher_id),
        int(draft.day_of_week),
        int(draft.start_time_minutes),
        int(draft.duration_minutes),
        int(draft.lesson_count),
        int(draft.attendance_window_minutes),
        draft.location,
        1 if draft.is_active else 0,
    )


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lessons WHERE lesson_id=%s", (int(lesson_id),))
            r = fetchone(cur)
            return _to_lesson(r) if r else None

    def list_lessons(
        self,
        *,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        day_of_week: Optional[int] = None,
    ) -> Sequence[Lesson]:
        clauses: list[str] = []
        params: list[object] = []
        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(int(class_id))
        if teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(int(teacher_id))
        if day_of_week is not None:
            clauses.append("day_of_week=%s")
            params.append(int(day_of_week))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM lessons {where_clause(clauses)} ORDER BY day_of_week, start_time_minutes",
                tuple(params),
            )
            return [_to_lesson(r) for r in fetchall(cur)]

    def find_duplicate(self, draft: LessonDraft, *, exclude_id: Optional[int] = None) -> Optional[Lesson]:
        sql = f"""
            SELECT {_COLUMNS} FROM lessons
            WHERE class_id=%s AND teacher_id=%s AND day_of_week=%s AND subject=%s AND start_time_minutes=%s
        """
        params: list[object] = [
            int(draft.class_id),
            int(draft.teacher_id),
            int(draft.day_of_week),
            draft.subject,
            int(draft.start_time_minutes),
        ]
        if exclude_id is not None:
            sql += " AND lesson_id<>%s"
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            r = fetchone(cur)
            return _to_lesson(r) if r else None

    def create(self, draft: LessonDraft, *, created_at: Optional[datetime] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lessons(
                    subject, class_id, teacher_id, day_of_week, start_time_minutes, duration_minutes,
                    lesson_count, attendance_window_minutes, location, is_active, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,COALESCE(%s, CURRENT_TIMESTAMP))
                """,
                (*_draft_params(draft), created_at),
            )
            return int(cur.lastrowid)

    def update(self, lesson_id: int, draft: LessonDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lessons
                SET subject=%s, class_id=%s, teacher_id=%s, day_of_week=%s, start_time_minutes=%s,
                    duration_minutes=%s, lesson_count=%s, attendance_window_minutes=%s, location=%s, is_active=%s
                WHERE lesson_id=%s
                """,
                (*_draft_params(draft), int(lesson_id)),
            )
            return cur.rowcount > 0

    def delete(self, lesson_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM lessons WHERE lesson_id=%s", (int(lesson_id),))
            return cur.rowcount > 0

    def count(self, *, day_of_week: Optional[int] = None, teacher_id: Optional[int] = None) -> int:
        clauses: list[str] = []
        params: list[object] = []
        if day_of_week is not None:
            clauses.append("day_of_week=%s")
            params.append(int(day_of_week))
        if teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(int(teacher_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM lessons {where_clause(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0
