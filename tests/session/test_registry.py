from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.classroom_attendance.classroom_attendance.classes.model import Roster
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus, SessionState
from src.classroom_attendance.classroom_attendance.session.engine import reconcile
from src.classroom_attendance.classroom_attendance.session.model import LiveSession, Tally
from src.classroom_attendance.classroom_attendance.session.registry import SessionRegistry


def _session(class_id: str = "C1") -> LiveSession:
    return LiveSession(class_id=class_id, teacher_id="T1", started_at=datetime(2026, 3, 2, tzinfo=timezone.utc))


def test_registry_lifecycle():
    reg = SessionRegistry()
    assert reg.get() is None
    assert reg.state == SessionState.IDLE

    reg.set(_session())
    assert reg.state == SessionState.ACTIVE

    reg.begin_commit()
    assert reg.state == SessionState.COMMITTING

    reg.end_commit(success=False)
    assert reg.state == SessionState.ACTIVE
    assert reg.get().class_id == "C1"

    reg.begin_commit()
    reg.end_commit(success=True)
    assert reg.get() is None
    assert reg.state == SessionState.IDLE


def test_commit_needs_active_session():
    reg = SessionRegistry()
    with pytest.raises(RuntimeError):
        reg.begin_commit()


def test_tally_counts_only_present_and_absent():
    tally = Tally.of([AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.PRESENT, AttendanceStatus.LATE])
    assert tally.to_dict() == {"present": 2, "absent": 1, "total": 3}


def test_reconcile_defaults_to_absent_and_ignores_strays():
    roster = Roster(class_id="C1", teacher_id="T1", student_ids=("S1", "S2"))
    final = reconcile(roster, {"S1": AttendanceStatus.PRESENT, "S9": AttendanceStatus.PRESENT})
    assert final == {"S1": AttendanceStatus.PRESENT, "S2": AttendanceStatus.ABSENT}


def test_session_view_uses_iso_timestamp():
    assert _session().to_dict() == {"classId": "C1", "startedAt": "2026-03-02T00:00:00Z"}
