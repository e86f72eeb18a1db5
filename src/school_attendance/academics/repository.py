from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, Level, SchoolClass


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, name: str) -> int:
        raise NotImplementedError

    def update(self, department_id: int, *, name: str) -> bool:
        raise NotImplementedError

    def delete(self, department_id: int) -> bool:
        raise NotImplementedError


class LevelRepository(Protocol):
    def list_all(self) -> Sequence[Level]:
        raise NotImplementedError

    def get_by_id(self, level_id: int) -> Optional[Level]:
        raise NotImplementedError

    def get_by_number(self, number: int) -> Optional[Level]:
        raise NotImplementedError

    def create(self, *, number: int, name: str) -> int:
        raise NotImplementedError

    def update(self, level_id: int, *, number: int, name: str) -> bool:
        raise NotImplementedError

    def delete(self, level_id: int) -> bool:
        raise NotImplementedError


class ClassRepository(Protocol):
    def list_all(self, *, department_id: Optional[int] = None, level_id: Optional[int] = None) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create(self, *, name: str, department_id: int, level_id: int, academic_year: Optional[str]) -> int:
        raise NotImplementedError

    def update(
        self,
        class_id: int,
        *,
        name: str,
        department_id: int,
        level_id: int,
        academic_year: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, class_id: int) -> bool:
        raise NotImplementedError
