from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a user account.

    Note: plain data object, no database access. Ids are strings at the
    domain boundary.
    """

    user_id: str
    name: str
    email: str
    password_hash: str
    role: Role

    def public_view(self) -> dict:
        return {"_id": self.user_id, "name": self.name, "email": self.email, "role": self.role.value}


@dataclass(frozen=True)
class Identity:
    """Who is calling: the verified claims of a token."""

    user_id: str
    role: Role
