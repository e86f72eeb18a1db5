from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import DenialReason
from ...lessons.model import Lesson
from ..window import AttendanceWindow


@dataclass(frozen=True)
class MarkingDecision:
    allowed: bool
    window: AttendanceWindow
    now: datetime
    reason: Optional[DenialReason] = None
    message: Optional[str] = None
    override: bool = False

    @property
    def inside_window(self) -> bool:
        return self.window.contains(self.now)

    def to_payload(self) -> dict:
        """JSON body describing the window, returned to clients on denial."""
        return {
            "message": self.message,
            "reason": self.reason.value if self.reason else None,
            "opensAt": self.window.opens_at.isoformat(),
            "closesAt": self.window.closes_at.isoformat(),
            "currentTime": self.now.isoformat(),
            "isInstantLesson": self.window.is_instant,
        }


class MarkingStrategy(ABC):
    """Strategy Pattern: how one role is allowed to mark attendance."""

    @abstractmethod
    def decide(self, *, lesson: Lesson, window: AttendanceWindow, now: datetime, force: bool) -> MarkingDecision:
        raise NotImplementedError
