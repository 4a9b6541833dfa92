from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Roster:
    """Owning teacher and enrolled students of one class."""

    class_id: str
    teacher_id: str
    student_ids: tuple[str, ...] = ()

    def is_enrolled(self, student_id: str) -> bool:
        return str(student_id) in self.student_ids


@dataclass(frozen=True)
class Classroom:
    class_id: str
    name: str
    teacher_id: str
    student_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def roster(self) -> Roster:
        return Roster(class_id=self.class_id, teacher_id=self.teacher_id, student_ids=self.student_ids)

    def summary_view(self) -> dict:
        return {
            "_id": self.class_id,
            "className": self.name,
            "teacherId": self.teacher_id,
            "studentIds": list(self.student_ids),
        }
