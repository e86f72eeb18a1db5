from __future__ import annotations

import pytest

from school_attendance.attendance.factory import MarkingStrategyFactory
from school_attendance.attendance.strategies.staff_strategy import StaffMarkingStrategy
from school_attendance.attendance.strategies.student_strategy import StudentMarkingStrategy
from school_attendance.core.enums import Role


def test_factory_covers_every_role():
    factory = MarkingStrategyFactory()

    assert isinstance(factory.for_role(Role.STUDENT), StudentMarkingStrategy)
    assert isinstance(factory.for_role(Role.TEACHER), StaffMarkingStrategy)
    assert isinstance(factory.for_role(Role.ADMIN), StaffMarkingStrategy)


def test_factory_accepts_role_values():
    assert isinstance(MarkingStrategyFactory().for_role("student"), StudentMarkingStrategy)


def test_factory_rejects_missing_role():
    with pytest.raises(ValueError, match="student"):
        MarkingStrategyFactory(strategies={Role.ADMIN: StaffMarkingStrategy(), Role.TEACHER: StaffMarkingStrategy()})
