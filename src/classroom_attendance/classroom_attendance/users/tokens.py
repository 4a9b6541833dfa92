from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import jwt

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Identity

JWT_ALGO = "HS256"


class TokenService:
    """Issue and verify signed access tokens.

    Claims: userId, role, iat, exp. Verification is the only thing the
    session engine and the realtime channel know about authentication.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._secret = secret
        self._ttl = timedelta(hours=int(ttl_hours))
        self._clock = clock

    def issue(self, *, user_id: str, role: Role) -> str:
        now = self._clock()
        payload = {
            "userId": str(user_id),
            "role": role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        # pyjwt returns str in v2+
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGO)

    def verify(self, token: str | None) -> Identity:
        if not token:
            raise AuthenticationError("Unauthorized or invalid token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGO])
            return Identity(user_id=str(payload["userId"]), role=Role(payload["role"]))
        except (jwt.InvalidTokenError, KeyError, ValueError):
            raise AuthenticationError("Unauthorized or invalid token")
