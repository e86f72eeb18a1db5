import pytest
from werkzeug.security import check_password_hash

from conftest import ADMIN_ID
from school_attendance.core.enums import Role
from school_attendance.core.exceptions import AuthorizationError, ValidationError
from school_attendance.system.model import SystemSettings
from school_attendance.system.service import DEFAULT_ADMIN_PASSWORD


def test_defaults_created_on_first_read(school):
    svc = school.container.settings_service
    assert school.settings.settings is None

    settings = svc.current()

    assert settings == SystemSettings()
    assert settings.default_attendance_window == 30
    assert school.settings.saves == 1
    svc.current()
    assert school.settings.saves == 1


def test_update_validates_values(school):
    svc = school.container.settings_service
    updated = svc.update(
        current_role=Role.ADMIN,
        changes={"default_attendance_window": "45", "school_name": "  Hill School ", "email_notifications": False},
    )

    assert updated.default_attendance_window == 45
    assert updated.school_name == "Hill School"
    assert updated.email_notifications is False
    assert school.settings.get() == updated


@pytest.mark.parametrize(
    "changes",
    [
        {"default_attendance_window": 2},
        {"default_lesson_duration": 500},
        {"default_lesson_gap": -1},
        {"allow_teacher_override": "yes"},
        {"colour": "blue"},
    ],
)
def test_update_rejects_bad_input(school, changes):
    with pytest.raises(ValidationError):
        school.container.settings_service.update(current_role=Role.ADMIN, changes=changes)


def test_update_requires_admin(school):
    with pytest.raises(AuthorizationError):
        school.container.settings_service.update(current_role=Role.TEACHER, changes={})


def test_clear_all_data_keeps_admins_and_resets_password(school, caplog):
    svc = school.container.settings_service
    svc.update(current_role=Role.ADMIN, changes={"school_name": "Hill School"})

    with pytest.raises(AuthorizationError):
        svc.clear_all_data(current_role=Role.TEACHER)

    svc.clear_all_data(current_role=Role.ADMIN)

    assert list(school.users.items) == [ADMIN_ID]
    assert check_password_hash(school.users.get_by_id(ADMIN_ID).password_hash, DEFAULT_ADMIN_PASSWORD)
    assert not school.classes.items and not school.departments.items and not school.levels.items
    assert svc.current().school_name == "Hill School"
    assert "All school data cleared" in caplog.text
