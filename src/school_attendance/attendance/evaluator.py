from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..lessons.model import Lesson
from .factory import MarkingStrategyFactory
from .strategies.base import MarkingDecision
from .window import compute_window

_DEFAULT_FACTORY = MarkingStrategyFactory()


def evaluate_marking(
    lesson: Lesson,
    *,
    now: datetime,
    role: Role,
    force: bool = False,
    factory: Optional[MarkingStrategyFactory] = None,
) -> MarkingDecision:
    """Decide whether ``role`` may mark attendance for ``lesson`` at ``now``.

    Pure: no clock reads, no I/O, no logging. Denials come back as a
    ``MarkingDecision`` with ``allowed=False``; only malformed lesson data
    raises (``InvalidLessonScheduleError``).
    """
    window = compute_window(lesson, now)
    strategy = (factory or _DEFAULT_FACTORY).for_role(role)
    return strategy.decide(lesson=lesson, window=window, now=now, force=bool(force))
