from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Lesson, LessonDraft


class LessonRepository(Protocol):
    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        raise NotImplementedError

    def list_lessons(
        self,
        *,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        day_of_week: Optional[int] = None,
    ) -> Sequence[Lesson]:
        """Lessons ordered by weekday then start time."""

        raise NotImplementedError

    def find_duplicate(self, draft: LessonDraft, *, exclude_id: Optional[int] = None) -> Optional[Lesson]:
        """Same class, teacher, weekday, subject and start time."""

        raise NotImplementedError

    def create(self, draft: LessonDraft, *, created_at: Optional[datetime] = None) -> int:
        raise NotImplementedError

    def update(self, lesson_id: int, draft: LessonDraft) -> bool:
        raise NotImplementedError

    def delete(self, lesson_id: int) -> bool:
        raise NotImplementedError

    def count(self, *, day_of_week: Optional[int] = None, teacher_id: Optional[int] = None) -> int:
        raise NotImplementedError
