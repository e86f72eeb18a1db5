from __future__ import annotations

from typing import Optional, Sequence

from ..common.permissions import require_admin
from ..common.validators import optional_str, require_int, require_non_empty, require_positive_int
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Department, Level, SchoolClass
from .repository import ClassRepository, DepartmentRepository, LevelRepository


class AcademicsService:
    """Use cases: manage departments, levels and classes (admin)."""

    def __init__(self, departments: DepartmentRepository, levels: LevelRepository, classes: ClassRepository):
        self._departments = departments
        self._levels = levels
        self._classes = classes

    # Departments

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def get_department(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError("Department not found")
        return department

    def create_department(self, *, current_role: Role, name: str) -> Department:
        require_admin(current_role)
        name = require_non_empty(name, "Department name", max_len=100)
        if self._departments.get_by_name(name):
            raise ValidationError("Department name already exists")
        department_id = self._departments.create(name=name)
        return self.get_department(department_id)

    def update_department(self, *, current_role: Role, department_id: int, name: str) -> Department:
        require_admin(current_role)
        self.get_department(department_id)
        name = require_non_empty(name, "Department name", max_len=100)
        existing = self._departments.get_by_name(name)
        if existing and existing.department_id != int(department_id):
            raise ValidationError("Department name already exists")
        self._departments.update(int(department_id), name=name)
        return self.get_department(department_id)

    def delete_department(self, *, current_role: Role, department_id: int) -> None:
        require_admin(current_role)
        if not self._departments.delete(int(department_id)):
            raise NotFoundError("Department not found")

    # Levels

    def list_levels(self) -> Sequence[Level]:
        return self._levels.list_all()

    def get_level(self, level_id: int) -> Level:
        level = self._levels.get_by_id(int(level_id))
        if not level:
            raise NotFoundError("Level not found")
        return level

    def create_level(self, *, current_role: Role, number: int, name: str) -> Level:
        require_admin(current_role)
        number = require_int(number, "Level number")
        name = require_non_empty(name, "Level name", max_len=100)
        if self._levels.get_by_number(number):
            raise ValidationError("Level number already exists")
        level_id = self._levels.create(number=number, name=name)
        return self.get_level(level_id)

    def update_level(self, *, current_role: Role, level_id: int, number: int, name: str) -> Level:
        require_admin(current_role)
        self.get_level(level_id)
        number = require_int(number, "Level number")
        name = require_non_empty(name, "Level name", max_len=100)
        existing = self._levels.get_by_number(number)
        if existing and existing.level_id != int(level_id):
            raise ValidationError("Level number already exists")
        self._levels.update(int(level_id), number=number, name=name)
        return self.get_level(level_id)

    def delete_level(self, *, current_role: Role, level_id: int) -> None:
        require_admin(current_role)
        if not self._levels.delete(int(level_id)):
            raise NotFoundError("Level not found")

    # Classes

    def list_classes(self, *, department_id: Optional[int] = None, level_id: Optional[int] = None) -> Sequence[SchoolClass]:
        return self._classes.list_all(department_id=department_id, level_id=level_id)

    def get_class(self, class_id: int) -> SchoolClass:
        school_class = self._classes.get_by_id(int(class_id))
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class

    def _validated_class_fields(self, name, department_id, level_id, academic_year) -> dict:
        department_id = require_positive_int(department_id, "Department")
        level_id = require_positive_int(level_id, "Level")
        self.get_department(department_id)
        self.get_level(level_id)
        return {
            "name": require_non_empty(name, "Class name", max_len=100),
            "department_id": department_id,
            "level_id": level_id,
            "academic_year": optional_str(academic_year),
        }

    def create_class(
        self,
        *,
        current_role: Role,
        name: str,
        department_id: int,
        level_id: int,
        academic_year: Optional[str] = None,
    ) -> SchoolClass:
        require_admin(current_role)
        fields = self._validated_class_fields(name, department_id, level_id, academic_year)
        class_id = self._classes.create(**fields)
        return self.get_class(class_id)

    def update_class(
        self,
        *,
        current_role: Role,
        class_id: int,
        name: str,
        department_id: int,
        level_id: int,
        academic_year: Optional[str] = None,
    ) -> SchoolClass:
        require_admin(current_role)
        self.get_class(class_id)
        fields = self._validated_class_fields(name, department_id, level_id, academic_year)
        self._classes.update(int(class_id), **fields)
        return self.get_class(class_id)

    def delete_class(self, *, current_role: Role, class_id: int) -> None:
        require_admin(current_role)
        if not self._classes.delete(int(class_id)):
            raise NotFoundError("Class not found")
