from __future__ import annotations

from typing import Optional, Protocol

from .model import SystemSettings


class SettingsRepository(Protocol):
    def get(self) -> Optional[SystemSettings]:
        raise NotImplementedError

    def save(self, settings: SystemSettings) -> None:
        """Insert the single settings row or overwrite it."""

        raise NotImplementedError


class MaintenanceRepository(Protocol):
    def clear_school_data(self, *, admin_password_hash: str) -> None:
        """Delete everything except admin accounts and settings, in one transaction."""

        raise NotImplementedError
