from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Classroom, Roster


class ClassRepository(Protocol):
    """Classes and enrolment. ``get_roster`` is what the session engine reads."""

    def get_by_id(self, class_id: str) -> Optional[Classroom]:
        raise NotImplementedError

    def get_roster(self, class_id: str) -> Optional[Roster]:
        raise NotImplementedError

    def create_class(self, *, name: str, teacher_id: str) -> str:
        raise NotImplementedError

    def add_student(self, *, class_id: str, student_id: str) -> bool:
        """Enrol a student; returns False when already enrolled."""

        raise NotImplementedError

    def remove_student(self, *, class_id: str, student_id: str) -> bool:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: str) -> Sequence[Classroom]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[Classroom]:
        raise NotImplementedError
