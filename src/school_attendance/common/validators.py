from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_.-]+$")
_LETTER_AND_DIGIT_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d).+$")


def require_non_empty(value: Optional[str], field_name: str, *, max_len: Optional[int] = None) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    value = value.strip()
    if max_len is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_positive_int(value: Any, field_name: str) -> int:
    number = require_int(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} is required")
    return number


def require_int_range(value: Any, field_name: str, *, minimum: int, maximum: Optional[int] = None) -> int:
    number = require_int(value, field_name)
    if number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} cannot exceed {maximum}")
    return number


def require_username(value: Optional[str], field_name: str = "Username") -> str:
    username = require_non_empty(value, field_name, max_len=50)
    if not _USERNAME_RE.match(username):
        raise ValidationError(f"{field_name} can only contain letters, numbers, and the symbols _.-")
    return username


def require_student_password(value: Optional[str]) -> str:
    password = require_min_length(value, "Password", 6)
    if len(password) > 100:
        raise ValidationError("Password is too long")
    if not _LETTER_AND_DIGIT_RE.match(password):
        raise ValidationError("Password must contain at least one letter and one number")
    return password


def optional_str(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
