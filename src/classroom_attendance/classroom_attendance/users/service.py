from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Identity, User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: sign up, log in, and resolve the current user."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def signup(self, *, name: str, email: str, password: str, role: str) -> User:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)
        try:
            role_enum = Role(role)
        except ValueError:
            raise ValidationError("Role must be teacher or student")

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role_enum,
        )
        logger.info("Created %s account %s", role_enum.value, user_id)
        return User(user_id=user_id, name=name, email=email, password_hash="", role=role_enum)

    def login(self, email: str, password: str) -> str:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return self._tokens.issue(user_id=user.user_id, role=user.role)

    def verify(self, token: Optional[str]) -> Identity:
        return self._tokens.verify(token)

    def get_profile(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user


class UserService:
    def __init__(self, users: UserRepository):
        self._users = users

    def list_students(self) -> Sequence[User]:
        return self._users.list_by_role(Role.STUDENT)
