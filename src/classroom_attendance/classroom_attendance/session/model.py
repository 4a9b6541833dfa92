from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class LiveSession:
    """The single in-memory attendance-taking event.

    ``attendance`` maps student id -> status; a missing key means "not yet
    marked", which is different from an explicit ABSENT.
    """

    class_id: str
    teacher_id: str
    started_at: datetime
    attendance: dict[str, AttendanceStatus] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"classId": self.class_id, "startedAt": to_iso(self.started_at)}


@dataclass(frozen=True)
class Tally:
    present: int
    absent: int

    @property
    def total(self) -> int:
        return self.present + self.absent

    @classmethod
    def of(cls, statuses: Iterable[AttendanceStatus]) -> "Tally":
        present = absent = 0
        for status in statuses:
            if status == AttendanceStatus.PRESENT:
                present += 1
            elif status == AttendanceStatus.ABSENT:
                absent += 1
        return cls(present=present, absent=absent)

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "total": self.total}
