from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceHistoryRow, AttendanceRecord, AttendanceTally, RecentAttendanceRow


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        lesson_id: int,
        student_id: int,
        occurrence_date: date,
        status: AttendanceStatus,
        marked_at: datetime,
    ) -> AttendanceRecord:
        """Insert or update the single row of (lesson, student, occurrence) atomically."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        lesson_ids: Optional[Sequence[int]] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """``lesson_ids=None`` means no lesson filter; an empty list matches nothing."""

        raise NotImplementedError

    def history_for_student(self, student_id: int, *, limit: int) -> Sequence[AttendanceHistoryRow]:
        raise NotImplementedError

    def recent(self, *, limit: int) -> Sequence[RecentAttendanceRow]:
        raise NotImplementedError

    def tally(
        self,
        *,
        student_id: Optional[int] = None,
        lesson_ids: Optional[Sequence[int]] = None,
    ) -> AttendanceTally:
        raise NotImplementedError

    def tally_by_student(self, lesson_ids: Sequence[int]) -> dict[int, AttendanceTally]:
        raise NotImplementedError

    def tally_by_class(self) -> dict[int, AttendanceTally]:
        raise NotImplementedError
