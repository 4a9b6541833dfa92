from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Status stored in attendance records.

    LATE exists only in the durable record shape; a live session accepts
    PRESENT and ABSENT.
    """

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class SessionState(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    COMMITTING = "COMMITTING"


class EventType(str, Enum):
    """Realtime envelope event names."""

    ATTENDANCE_MARKED = "ATTENDANCE_MARKED"
    TODAY_SUMMARY = "TODAY_SUMMARY"
    MY_ATTENDANCE = "MY_ATTENDANCE"
    DONE = "DONE"
    SESSION_STARTED = "SESSION_STARTED"
    SESSION_ENDED = "SESSION_ENDED"
    ERROR = "ERROR"
