from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's final status for one class on one day.

    Natural key: (class_id, student_id, session_date).
    """

    class_id: str
    student_id: str
    status: AttendanceStatus
    session_date: date
    recorded_at: datetime

    def to_dict(self) -> dict:
        return {
            "classId": self.class_id,
            "studentId": self.student_id,
            "status": self.status.value,
            "date": self.session_date.isoformat(),
            "recordedAt": to_iso(self.recorded_at),
        }
