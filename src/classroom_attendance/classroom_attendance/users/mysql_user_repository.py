from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_pk
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, name, email, password_hash, role"


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        pk = to_pk(user_id)
        if pk is None:
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (pk,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role)
                VALUES(%s,%s,%s,%s)
                """,
                (name, email, password_hash, role.value),
            )
            return str(cur.lastrowid)

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s ORDER BY name", (role.value,))
            return [_to_user(r) for r in fetchall(cur)]
