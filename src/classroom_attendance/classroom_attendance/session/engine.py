from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..classes.model import Roster
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import COMMIT_MESSAGE, LIVE_STATUSES, NOT_YET_UPDATED
from ..core.enums import AttendanceStatus, EventType, Role, SessionState
from ..core.exceptions import (
    AuthorizationError,
    NoActiveSessionError,
    NotFoundError,
    SessionBusyError,
    ValidationError,
)
from ..users.model import Identity
from .model import LiveSession, Tally
from .permissions import Ownership, requires
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def broadcast(self, event: EventType, data: dict) -> None:
        raise NotImplementedError


class _NullSink:
    def broadcast(self, event: EventType, data: dict) -> None:
        return None


def reconcile(roster: Roster, marks: dict[str, AttendanceStatus]) -> dict[str, AttendanceStatus]:
    """Final status for every enrolled student; unmarked students are absent."""

    return {sid: marks.get(sid, AttendanceStatus.ABSENT) for sid in roster.student_ids}


class SessionEngine:
    """State machine for the live attendance session.

    IDLE -> ACTIVE (start), ACTIVE -> ACTIVE (mark/summary/my_status/start),
    ACTIVE -> COMMITTING -> IDLE (commit) or back to ACTIVE on failure,
    ACTIVE -> IDLE (stop).

    Mutations and their broadcasts happen under the registry lock, so every
    connection sees broadcasts in completion order. Commit drops the lock
    while it talks to the roster and the store; the COMMITTING state keeps
    start/mark/stop/commit out meanwhile.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        roster: ClassRepository,
        store: AttendanceRepository,
        *,
        events: Optional[EventSink] = None,
        clock: Callable[[], datetime] = now_utc,
        strict_ownership: bool = False,
    ):
        self._registry = registry
        self._roster = roster
        self._store = store
        self._events: EventSink = events if events is not None else _NullSink()
        self._clock = clock
        self._strict_ownership = bool(strict_ownership)

    # -- ownership predicates (called by the capability layer) -------------

    def check_class_owner(self, actor: Identity, class_id: Any) -> Roster:
        roster = self._roster.get_roster(str(class_id))
        if roster is None:
            raise NotFoundError("Class not found")
        if roster.teacher_id != actor.user_id:
            raise AuthorizationError("Forbidden, not class teacher")
        return roster

    def check_session_owner(self, actor: Identity) -> None:
        if not self._strict_ownership:
            return
        session = self._registry.get()
        if session is not None and session.teacher_id != actor.user_id:
            raise AuthorizationError("Forbidden, not class teacher")

    # -- helpers ------------------------------------------------------------

    def _require_session(self) -> LiveSession:
        session = self._registry.get()
        if session is None:
            raise NoActiveSessionError("No active attendance session")
        return session

    def _reject_while_committing(self) -> None:
        if self._registry.state == SessionState.COMMITTING:
            raise SessionBusyError("Attendance is being saved, try again shortly")

    @staticmethod
    def _parse_mark(student_id: Any, status: Any) -> tuple[str, AttendanceStatus]:
        if isinstance(student_id, bool) or not isinstance(student_id, (str, int)):
            raise ValidationError("Invalid ATTENDANCE_MARKED payload")
        sid = str(student_id).strip()
        if not sid or not isinstance(status, str):
            raise ValidationError("Invalid ATTENDANCE_MARKED payload")
        try:
            parsed = AttendanceStatus(status)
        except ValueError:
            raise ValidationError("Invalid ATTENDANCE_MARKED payload")
        if parsed not in LIVE_STATUSES:
            raise ValidationError("Invalid ATTENDANCE_MARKED payload")
        return sid, parsed

    # -- operations ---------------------------------------------------------

    def current(self) -> Optional[LiveSession]:
        return self._registry.get()

    @requires(Role.TEACHER, ownership=Ownership.CLASS)
    def start(self, actor: Identity, class_id: str) -> LiveSession:
        with self._registry.lock:
            self._reject_while_committing()
            previous = self._registry.get()
            session = LiveSession(class_id=str(class_id), teacher_id=actor.user_id, started_at=self._clock())
            self._registry.set(session)
            if previous is not None:
                logger.warning(
                    "Session for class %s replaced by a new session for class %s (%d marks discarded)",
                    previous.class_id,
                    session.class_id,
                    len(previous.attendance),
                )
            logger.info("Attendance session started for class %s by %s", session.class_id, actor.user_id)
            self._events.broadcast(EventType.SESSION_STARTED, session.to_dict())
        return session

    @requires(Role.TEACHER, ownership=Ownership.CLASS)
    def stop(self, actor: Identity, class_id: str) -> datetime:
        with self._registry.lock:
            session = self._require_session()
            self._reject_while_committing()
            if session.class_id != str(class_id):
                raise NoActiveSessionError("No active attendance session for this class")
            self._registry.clear()
            ended_at = self._clock()
            logger.info("Attendance session for class %s stopped without saving", session.class_id)
            self._events.broadcast(EventType.SESSION_ENDED, {"classId": session.class_id, "endedAt": to_iso(ended_at)})
        return ended_at

    @requires(Role.TEACHER, ownership=Ownership.SESSION)
    def mark(self, actor: Identity, student_id: Any, status: Any) -> tuple[str, AttendanceStatus]:
        with self._registry.lock:
            session = self._require_session()
            self._reject_while_committing()
            sid, parsed = self._parse_mark(student_id, status)
            session.attendance[sid] = parsed
            self._events.broadcast(EventType.ATTENDANCE_MARKED, {"studentId": sid, "status": parsed.value})
        return sid, parsed

    @requires(Role.TEACHER, ownership=Ownership.SESSION)
    def summary(self, actor: Identity) -> Tally:
        with self._registry.lock:
            session = self._require_session()
            tally = Tally.of(session.attendance.values())
            self._events.broadcast(EventType.TODAY_SUMMARY, tally.to_dict())
        return tally

    @requires(Role.STUDENT)
    def my_status(self, actor: Identity) -> str:
        with self._registry.lock:
            session = self._require_session()
            status = session.attendance.get(actor.user_id)
        return status.value if status else NOT_YET_UPDATED

    @requires(Role.TEACHER, ownership=Ownership.SESSION)
    def commit(self, actor: Identity) -> Tally:
        with self._registry.lock:
            session = self._require_session()
            self._reject_while_committing()
            self._registry.begin_commit()
            marks = dict(session.attendance)

        try:
            roster = self._roster.get_roster(session.class_id)
            if roster is None:
                raise NotFoundError("Class not found")

            final = reconcile(roster, marks)
            stray = sorted(set(marks) - set(final))
            if stray:
                logger.warning("Dropping marks for students not enrolled in class %s: %s", session.class_id, stray)

            now = self._clock()
            records = [
                AttendanceRecord(
                    class_id=session.class_id,
                    student_id=sid,
                    status=status,
                    session_date=now.date(),
                    recorded_at=now,
                )
                for sid, status in final.items()
            ]
            self._store.save_session(class_id=session.class_id, session_date=now.date(), records=records)
        except Exception:
            with self._registry.lock:
                self._registry.end_commit(success=False)
            logger.warning("Commit for class %s failed; session left active", session.class_id)
            raise

        tally = Tally.of(final.values())
        with self._registry.lock:
            self._registry.end_commit(success=True)
            logger.info(
                "Attendance for class %s persisted (%d present, %d absent)",
                session.class_id,
                tally.present,
                tally.absent,
            )
            self._events.broadcast(EventType.DONE, {"message": COMMIT_MESSAGE, **tally.to_dict()})
        return tally
