from __future__ import annotations

from datetime import date
from typing import Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.model import Identity
from .repository import AttendanceRepository


class AttendanceRecordService:
    """Read side of persisted attendance (what commit wrote)."""

    def __init__(self, attendance: AttendanceRepository, classes: ClassRepository):
        self._attendance = attendance
        self._classes = classes

    def my_attendance(self, actor: Identity, class_id: str) -> dict:
        if actor.role != Role.STUDENT:
            raise AuthorizationError("Forbidden, student access required")

        roster = self._classes.get_roster(str(class_id))
        if not roster:
            raise NotFoundError("Class not found")
        if not roster.is_enrolled(actor.user_id):
            raise AuthorizationError("Forbidden, student not enrolled in class")

        record = self._attendance.get_latest_for_student(class_id=roster.class_id, student_id=actor.user_id)
        return {"classId": roster.class_id, "status": record.status.value if record else None}

    def class_attendance(self, actor: Identity, class_id: str, *, session_date: Optional[date] = None) -> dict:
        roster = self._classes.get_roster(str(class_id))
        if not roster:
            raise NotFoundError("Class not found")
        if roster.teacher_id != actor.user_id:
            raise AuthorizationError("Forbidden, not class teacher")

        session_date = session_date or now_utc().date()
        records = self._attendance.list_for_class(class_id=roster.class_id, session_date=session_date)
        return {
            "classId": roster.class_id,
            "date": session_date.isoformat(),
            "records": [r.to_dict() for r in records],
        }
