"""JSON helpers shared by the controllers.

Responses follow one shape: ``{"success": true, "data": ...}`` or
``{"success": false, "error": "..."}``.
"""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NoActiveSessionError,
    NotFoundError,
    SessionBusyError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (NoActiveSessionError, 409),
    (SessionBusyError, 409),
)


def json_ok(data: Any = None, *, status: int = 200, message: Optional[str] = None):
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def json_error(error: str, status: int):
    return jsonify({"success": False, "error": error}), status


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid request schema")
    return data


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    return header.split(" ", 1)[1].strip() if header.startswith("Bearer ") else header.strip()


def api_route(view):
    """Turn domain errors into JSON errors; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return json_error(str(e), status_for(e))
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return json_error("Server error", 500)

    return wrapper


def auth_required(verify, role: Optional[Role] = None):
    """Resolve the bearer token into ``g.identity`` and optionally gate on role."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                identity = verify(bearer_token())
            except AuthenticationError:
                return json_error("Unauthorized, token missing or invalid", 401)

            if role is not None and identity.role != role:
                return json_error(f"Forbidden, {role.value} access required", 403)

            g.identity = identity
            return view(*args, **kwargs)

        return wrapper

    return decorator
