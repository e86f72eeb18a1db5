from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from ..core.enums import Role
from .strategies.base import MarkingStrategy
from .strategies.staff_strategy import StaffMarkingStrategy
from .strategies.student_strategy import StudentMarkingStrategy


def _default_strategies() -> dict[Role, MarkingStrategy]:
    staff = StaffMarkingStrategy()
    return {
        Role.ADMIN: staff,
        Role.TEACHER: staff,
        Role.STUDENT: StudentMarkingStrategy(),
    }


@dataclass
class MarkingStrategyFactory:
    """Factory Pattern: one marking strategy per role.

    Every ``Role`` member must have a strategy; a new role without one fails
    when the factory is built rather than falling through at request time.
    """

    strategies: Mapping[Role, MarkingStrategy] = field(default_factory=_default_strategies)

    def __post_init__(self) -> None:
        missing = [role.value for role in Role if role not in self.strategies]
        if missing:
            raise ValueError(f"No marking strategy for role(s): {', '.join(missing)}")

    def for_role(self, role: Role) -> MarkingStrategy:
        return self.strategies[Role(role)]
