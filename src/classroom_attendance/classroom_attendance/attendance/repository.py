from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def save_session(self, *, class_id: str, session_date: date, records: Sequence[AttendanceRecord]) -> int:
        """Make ``records`` the class's attendance for ``session_date``, all-or-nothing.

        Records are upserted by natural key; rows for that class and day whose
        student is not in ``records`` are deleted.
        """

        raise NotImplementedError

    def get_latest_for_student(self, *, class_id: str, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_class(self, *, class_id: str, session_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
