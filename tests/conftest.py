from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceRecord
from src.classroom_attendance.classroom_attendance.classes.model import Classroom, Roster
from src.classroom_attendance.classroom_attendance.container import assemble_container
from src.classroom_attendance.classroom_attendance.core.enums import EventType, Role
from src.classroom_attendance.classroom_attendance.main import create_app
from src.classroom_attendance.classroom_attendance.session.engine import SessionEngine
from src.classroom_attendance.classroom_attendance.session.registry import SessionRegistry
from src.classroom_attendance.classroom_attendance.users.model import Identity, User

JWT_SECRET = "test-jwt-secret"
PASSWORD = "password123"


class InMemoryUsers:
    def __init__(self):
        self._by_id: dict[str, User] = {}
        self._id = 0

    def add(self, *, name: str, email: str, role: Role, password: str = PASSWORD) -> User:
        user_id = self.create_user(
            name=name, email=email, password_hash=generate_password_hash(password), role=role
        )
        return self._by_id[user_id]

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(str(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self._by_id.values():
            if u.email == email:
                return u
        return None

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> str:
        self._id += 1
        user_id = f"U{self._id}"
        self._by_id[user_id] = User(user_id=user_id, name=name, email=email, password_hash=password_hash, role=role)
        return user_id

    def list_by_role(self, role: Role) -> Sequence[User]:
        return [u for u in self._by_id.values() if u.role == role]


class InMemoryClasses:
    def __init__(self):
        self.classes: dict[str, Classroom] = {}
        self._id = 0

    def put(self, class_id: str, teacher_id: str, student_ids=(), name: str = "Class") -> Classroom:
        cls = Classroom(class_id=class_id, name=name, teacher_id=teacher_id, student_ids=tuple(student_ids))
        self.classes[class_id] = cls
        return cls

    def get_by_id(self, class_id: str) -> Optional[Classroom]:
        return self.classes.get(str(class_id))

    def get_roster(self, class_id: str) -> Optional[Roster]:
        cls = self.get_by_id(class_id)
        return cls.roster if cls else None

    def create_class(self, *, name: str, teacher_id: str) -> str:
        self._id += 1
        class_id = f"K{self._id}"
        self.put(class_id, teacher_id, name=name)
        return class_id

    def add_student(self, *, class_id: str, student_id: str) -> bool:
        cls = self.classes[class_id]
        if student_id in cls.student_ids:
            return False
        self.put(class_id, cls.teacher_id, cls.student_ids + (student_id,), name=cls.name)
        return True

    def remove_student(self, *, class_id: str, student_id: str) -> bool:
        cls = self.classes[class_id]
        if student_id not in cls.student_ids:
            return False
        remaining = tuple(s for s in cls.student_ids if s != student_id)
        self.put(class_id, cls.teacher_id, remaining, name=cls.name)
        return True

    def list_for_teacher(self, teacher_id: str) -> Sequence[Classroom]:
        return [c for c in self.classes.values() if c.teacher_id == teacher_id]

    def list_for_student(self, student_id: str) -> Sequence[Classroom]:
        return [c for c in self.classes.values() if student_id in c.student_ids]


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple[str, str, date], AttendanceRecord] = {}
        self.fail_next = False
        self.calls = 0

    def save_session(self, *, class_id: str, session_date: date, records: Sequence[AttendanceRecord]) -> int:
        self.calls += 1
        if self.fail_next:
            self.fail_next = False
            raise RuntimeError("database unavailable")
        keep = {r.student_id for r in records}
        for key in [k for k in self.rows if k[0] == class_id and k[2] == session_date and k[1] not in keep]:
            del self.rows[key]
        for r in records:
            self.rows[(r.class_id, r.student_id, r.session_date)] = r
        return len(records)

    def get_latest_for_student(self, *, class_id: str, student_id: str) -> Optional[AttendanceRecord]:
        mine = [r for (c, s, _), r in self.rows.items() if c == class_id and s == student_id]
        if not mine:
            return None
        return max(mine, key=lambda r: (r.session_date, r.recorded_at))

    def list_for_class(self, *, class_id: str, session_date: date) -> Sequence[AttendanceRecord]:
        rows = [r for (c, _, d), r in self.rows.items() if c == class_id and d == session_date]
        return sorted(rows, key=lambda r: r.student_id)


class RecordingSink:
    def __init__(self):
        self.events: list[tuple[EventType, dict]] = []

    def broadcast(self, event: EventType, data: dict) -> None:
        self.events.append((event, data))

    def names(self) -> list[str]:
        return [e.value for e, _ in self.events]


class FakeSocket:
    def __init__(self, *, fail: bool = False):
        self.sent: list[str] = []
        self.closed = False
        self.fail = fail

    def send(self, data: str) -> None:
        if self.fail:
            raise ConnectionError("socket gone")
        self.sent.append(data)

    def close(self, *args, **kwargs) -> None:
        self.closed = True


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def t1() -> Identity:
    return Identity(user_id="T1", role=Role.TEACHER)


@pytest.fixture
def t2() -> Identity:
    return Identity(user_id="T2", role=Role.TEACHER)


@pytest.fixture
def s1() -> Identity:
    return Identity(user_id="S1", role=Role.STUDENT)


@pytest.fixture
def s2() -> Identity:
    return Identity(user_id="S2", role=Role.STUDENT)


@pytest.fixture
def classes() -> InMemoryClasses:
    repo = InMemoryClasses()
    repo.put("C1", "T1", ("S1", "S2", "S3"))
    repo.put("C2", "T2", ("S1",))
    repo.put("C3", "T1", ("S4",))
    return repo


@pytest.fixture
def store() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def engine(registry, classes, store, sink, clock) -> SessionEngine:
    return SessionEngine(registry, classes, store, events=sink, clock=clock)


@pytest.fixture
def app_env():
    users = InMemoryUsers()
    classes_repo = InMemoryClasses()
    attendance = InMemoryAttendance()
    container = assemble_container(
        users_repo=users,
        classes_repo=classes_repo,
        attendance_repo=attendance,
        jwt_secret=JWT_SECRET,
    )
    app = create_app(container=container, settings_module="config.testing")
    return app, container


@pytest.fixture
def client(app_env):
    app, _ = app_env
    return app.test_client()


@pytest.fixture
def make_socket():
    return FakeSocket


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()
