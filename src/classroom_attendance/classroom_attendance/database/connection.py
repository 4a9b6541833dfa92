from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import DEFAULT_DB_CONNECT_TIMEOUT


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = DEFAULT_DB_CONNECT_TIMEOUT

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "classroom_attendance")),
            connect_timeout=int(db_config.get("connect_timeout", DEFAULT_DB_CONNECT_TIMEOUT)),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation, so worker threads
    never share a connection.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            connection_timeout=int(self._config.connect_timeout),
        )
        if with_database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
