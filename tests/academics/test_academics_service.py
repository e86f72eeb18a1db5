import pytest

from school_attendance.core.enums import Role
from school_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_department_names_are_unique(school):
    svc = school.container.academics_service
    maths = svc.create_department(current_role=Role.ADMIN, name="  Maths ")
    assert maths.name == "Maths"

    with pytest.raises(ValidationError, match="already exists"):
        svc.create_department(current_role=Role.ADMIN, name="Science")
    with pytest.raises(ValidationError, match="already exists"):
        svc.update_department(current_role=Role.ADMIN, department_id=maths.department_id, name="Science")

    renamed = svc.update_department(current_role=Role.ADMIN, department_id=maths.department_id, name="Mathematics")
    assert renamed.name == "Mathematics"


def test_only_admin_manages_academics(school):
    svc = school.container.academics_service
    with pytest.raises(AuthorizationError):
        svc.create_department(current_role=Role.TEACHER, name="Art")
    with pytest.raises(AuthorizationError):
        svc.create_level(current_role=Role.STUDENT, number=2, name="Level 2")
    with pytest.raises(AuthorizationError):
        svc.delete_class(current_role=Role.TEACHER, class_id=1)


def test_level_numbers_are_unique(school):
    svc = school.container.academics_service
    level = svc.create_level(current_role=Role.ADMIN, number="2", name="Level 2")
    assert level.number == 2

    with pytest.raises(ValidationError, match="already exists"):
        svc.create_level(current_role=Role.ADMIN, number=1, name="Again")
    with pytest.raises(ValidationError, match="must be an integer"):
        svc.create_level(current_role=Role.ADMIN, number="two", name="Level 2")

    assert [lv.number for lv in svc.list_levels()] == [1, 2]


def test_class_requires_existing_department_and_level(school):
    svc = school.container.academics_service
    created = svc.create_class(
        current_role=Role.ADMIN, name="Science 2A", department_id=1, level_id=1, academic_year=" "
    )
    assert created.academic_year is None

    with pytest.raises(NotFoundError, match="Department"):
        svc.create_class(current_role=Role.ADMIN, name="Ghost", department_id=99, level_id=1)
    with pytest.raises(NotFoundError, match="Level"):
        svc.create_class(current_role=Role.ADMIN, name="Ghost", department_id=1, level_id=99)
    with pytest.raises(ValidationError, match="Class name"):
        svc.create_class(current_role=Role.ADMIN, name="", department_id=1, level_id=1)


def test_list_classes_filters(school):
    svc = school.container.academics_service
    assert [c.name for c in svc.list_classes()] == ["Humanities 1B", "Science 1A"]
    assert [c.name for c in svc.list_classes(department_id=1)] == ["Science 1A"]


def test_update_and_delete_class(school):
    svc = school.container.academics_service
    updated = svc.update_class(
        current_role=Role.ADMIN, class_id=1, name="Science 1A+", department_id=2, level_id=1, academic_year="2025"
    )
    assert (updated.name, updated.department_id) == ("Science 1A+", 2)

    svc.delete_class(current_role=Role.ADMIN, class_id=1)
    with pytest.raises(NotFoundError):
        svc.get_class(1)
    with pytest.raises(NotFoundError):
        svc.delete_class(current_role=Role.ADMIN, class_id=1)
