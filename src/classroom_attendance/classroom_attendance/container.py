from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceRecordService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DatabaseConnection, DBConfig
from .realtime.channel import RealtimeChannel
from .realtime.hub import ConnectionHub
from .session.engine import SessionEngine
from .session.registry import SessionRegistry
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    classes_repo: ClassRepository
    attendance_repo: AttendanceRepository

    tokens: TokenService
    auth_service: AuthService
    user_service: UserService
    class_service: ClassService
    attendance_record_service: AttendanceRecordService

    registry: SessionRegistry
    hub: ConnectionHub
    session_engine: SessionEngine
    realtime_channel: RealtimeChannel


def assemble_container(
    *,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    attendance_repo: AttendanceRepository,
    jwt_secret: str,
    jwt_ttl_hours: int = 24,
    strict_session_ownership: bool = False,
    registry: Optional[SessionRegistry] = None,
) -> Container:
    tokens = TokenService(jwt_secret, ttl_hours=jwt_ttl_hours)
    auth_service = AuthService(users_repo, tokens)

    registry = registry or SessionRegistry()
    hub = ConnectionHub()
    engine = SessionEngine(
        registry,
        classes_repo,
        attendance_repo,
        events=hub,
        strict_ownership=strict_session_ownership,
    )

    return Container(
        users_repo=users_repo,
        classes_repo=classes_repo,
        attendance_repo=attendance_repo,
        tokens=tokens,
        auth_service=auth_service,
        user_service=UserService(users_repo),
        class_service=ClassService(classes_repo, users_repo),
        attendance_record_service=AttendanceRecordService(attendance_repo, classes_repo),
        registry=registry,
        hub=hub,
        session_engine=engine,
        realtime_channel=RealtimeChannel(engine, hub, auth_service.verify),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_ttl_hours: int = 24,
    strict_session_ownership: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        jwt_secret=jwt_secret,
        jwt_ttl_hours=jwt_ttl_hours,
        strict_session_ownership=strict_session_ownership,
    )
