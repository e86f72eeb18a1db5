from __future__ import annotations

from typing import Any, Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InvalidLessonScheduleError(ValidationError):
    """Raised when a lesson's schedule fields are out of range or missing."""


class AttendanceDeniedError(DomainError):
    """Raised by the service layer when a student may not mark attendance now.

    ``payload`` mirrors the JSON body returned to the client.
    """

    def __init__(self, message: str, *, payload: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.payload = dict(payload or {"message": message})
