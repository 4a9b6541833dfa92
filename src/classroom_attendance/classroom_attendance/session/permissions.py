"""Capability layer for session engine operations.

Each operation declares the role it needs and which ownership predicate
applies; the decorator runs both checks before the operation body, so a new
operation cannot forget them.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import wraps

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


class Ownership(str, Enum):
    NONE = "none"
    # Caller must own the class passed to the operation.
    CLASS = "class"
    # Caller must own the active session's class (strict mode only).
    SESSION = "session"


@dataclass(frozen=True)
class Capability:
    role: Role
    ownership: Ownership = Ownership.NONE


def requires(role: Role, *, ownership: Ownership = Ownership.NONE):
    capability = Capability(role=role, ownership=ownership)

    def decorator(method):
        @wraps(method)
        def wrapper(engine, actor, *args, **kwargs):
            if actor.role != role:
                raise AuthorizationError(f"Forbidden, {role.value} event only")

            if ownership == Ownership.CLASS:
                class_id = kwargs["class_id"] if "class_id" in kwargs else args[0]
                engine.check_class_owner(actor, class_id)
            elif ownership == Ownership.SESSION:
                engine.check_session_owner(actor)

            return method(engine, actor, *args, **kwargs)

        wrapper.capability = capability
        return wrapper

    return decorator
