from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.department_id, "name": self.name}


@dataclass(frozen=True)
class Level:
    level_id: int
    number: int
    name: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.level_id, "number": self.number, "name": self.name}


@dataclass(frozen=True)
class SchoolClass:
    class_id: int
    name: str
    department_id: int
    level_id: int
    academic_year: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "name": self.name,
            "departmentId": self.department_id,
            "levelId": self.level_id,
            "academicYear": self.academic_year,
        }
