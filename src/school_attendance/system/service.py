from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from werkzeug.security import generate_password_hash

from ..common.permissions import require_admin
from ..common.validators import require_int_range
from ..core.constants import MAX_DURATION_MINUTES, MIN_ATTENDANCE_WINDOW_MINUTES, MIN_DURATION_MINUTES
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import SystemSettings
from .repository import MaintenanceRepository, SettingsRepository

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_PASSWORD = "admin"

_BOOL_FIELDS = (
    "auto_disable_attendance",
    "allow_teacher_override",
    "email_notifications",
    "attendance_reminders",
    "low_attendance_alerts",
)


class SettingsService:
    """Use cases: read/update system settings, wipe school data."""

    def __init__(self, settings: SettingsRepository, maintenance: MaintenanceRepository):
        self._settings = settings
        self._maintenance = maintenance

    def current(self) -> SystemSettings:
        """Stored settings, creating the default row on first access."""
        settings = self._settings.get()
        if settings is None:
            settings = SystemSettings()
            self._settings.save(settings)
            logger.info("Initialized default system settings")
        return settings

    def update(self, *, current_role: Role, changes: Mapping[str, Any]) -> SystemSettings:
        require_admin(current_role)
        known = set(SystemSettings().as_fields())
        unknown = set(changes) - known
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {}
        for name, value in changes.items():
            if name in _BOOL_FIELDS:
                if not isinstance(value, bool):
                    raise ValidationError(f"{name} must be true or false")
                values[name] = value
            elif name == "school_name":
                values[name] = str(value or "").strip()[:200]
            elif name == "default_attendance_window":
                values[name] = require_int_range(value, "Default attendance window", minimum=MIN_ATTENDANCE_WINDOW_MINUTES)
            elif name == "default_lesson_duration":
                values[name] = require_int_range(
                    value, "Default lesson duration", minimum=MIN_DURATION_MINUTES, maximum=MAX_DURATION_MINUTES
                )
            elif name == "default_lesson_gap":
                values[name] = require_int_range(value, "Default lesson gap", minimum=0)

        updated = replace(self.current(), **values)
        self._settings.save(updated)
        return updated

    def clear_all_data(self, *, current_role: Role) -> None:
        """Remove all school data; admin accounts and settings survive.

        Admin passwords are reset to the default so the school can be set up again.
        """
        require_admin(current_role)
        self._maintenance.clear_school_data(admin_password_hash=generate_password_hash(DEFAULT_ADMIN_PASSWORD))
        logger.warning("All school data cleared; admin passwords reset")
