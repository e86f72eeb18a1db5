"""Flask helpers shared by the feature controllers."""

from __future__ import annotations

import logging
import re
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AttendanceDeniedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import SessionUser
from ..users.service import AuthService

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_STATUS_BY_ERROR = (
    (AttendanceDeniedError, 403),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
)


def snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def json_body() -> dict:
    """Request JSON with camelCase keys turned into snake_case."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return {snake_case(k): v for k, v in data.items()}


def arg_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def arg_bool(name: str) -> bool:
    return (request.args.get(name) or "").lower() == "true"


def current_actor() -> SessionUser:
    actor = g.get("actor")
    if actor is None:
        raise AuthenticationError("Unauthorized")
    return actor


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if g.get("actor") is None:
            return jsonify({"message": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {Role(r) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = g.get("actor")
            if actor is None:
                return jsonify({"message": "Unauthorized"}), 401
            if actor.role not in allowed:
                return jsonify({"message": "Forbidden"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(Role.ADMIN)
staff_required = roles_required(Role.ADMIN, Role.TEACHER)
student_required = roles_required(Role.STUDENT)


def start_session(actor: SessionUser) -> None:
    session.clear()
    session.permanent = True
    session["user_id"] = actor.user_id
    session["role"] = actor.role.value


def install(app: Flask, auth_service: AuthService) -> None:
    """Load the actor for each request and map domain errors to JSON."""

    @app.before_request
    def _load_actor() -> None:
        g.actor = None
        user_id = session.get("user_id")
        if user_id is None:
            return
        actor = auth_service.session_user(int(user_id))
        if actor is None:
            session.clear()
            return
        g.actor = actor

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError) -> Any:
        if isinstance(e, AttendanceDeniedError):
            return jsonify(e.payload), 403
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return jsonify({"message": str(e)}), status
        logger.error("Unhandled domain error: %s", e)
        return jsonify({"message": str(e)}), 400
