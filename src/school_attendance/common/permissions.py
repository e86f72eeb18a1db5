from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def require_role(current_role: Role, *allowed: Role, message: str = "You do not have permission") -> None:
    if Role(current_role) not in allowed:
        raise AuthorizationError(message)


def require_admin(current_role: Role) -> None:
    require_role(current_role, Role.ADMIN, message="Admin access required")


def require_staff(current_role: Role) -> None:
    require_role(current_role, Role.ADMIN, Role.TEACHER, message="Teacher or admin access required")
