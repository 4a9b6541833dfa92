from __future__ import annotations

import logging

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.model import Identity
from ..users.repository import UserRepository
from .model import Classroom
from .repository import ClassRepository

logger = logging.getLogger(__name__)


class ClassService:
    """Use case: manage classes and their enrolment."""

    def __init__(self, classes: ClassRepository, users: UserRepository):
        self._classes = classes
        self._users = users

    def _get(self, class_id: str) -> Classroom:
        cls = self._classes.get_by_id(str(class_id))
        if not cls:
            raise NotFoundError("Class not found")
        return cls

    def _get_owned(self, actor: Identity, class_id: str) -> Classroom:
        if actor.role != Role.TEACHER:
            raise AuthorizationError("Forbidden, teacher access required")
        cls = self._get(class_id)
        if cls.teacher_id != actor.user_id:
            raise AuthorizationError("Forbidden, not class teacher")
        return cls

    def create_class(self, actor: Identity, *, name: str) -> Classroom:
        if actor.role != Role.TEACHER:
            raise AuthorizationError("Forbidden, teacher access required")
        name = require_non_empty(name, "Class name")
        class_id = self._classes.create_class(name=name, teacher_id=actor.user_id)
        logger.info("Teacher %s created class %s", actor.user_id, class_id)
        return Classroom(class_id=class_id, name=name, teacher_id=actor.user_id)

    def add_student(self, actor: Identity, *, class_id: str, student_id: str) -> Classroom:
        cls = self._get_owned(actor, class_id)
        student_id = require_non_empty(student_id, "Student id")

        student = self._users.get_by_id(student_id)
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")

        if not cls.roster.is_enrolled(student.user_id):
            self._classes.add_student(class_id=cls.class_id, student_id=student.user_id)
        return self._get(cls.class_id)

    def remove_student(self, actor: Identity, *, class_id: str, student_id: str) -> Classroom:
        cls = self._get_owned(actor, class_id)
        self._classes.remove_student(class_id=cls.class_id, student_id=str(student_id))
        return self._get(cls.class_id)

    def get_class_detail(self, actor: Identity, class_id: str) -> dict:
        cls = self._get(class_id)
        if cls.teacher_id != actor.user_id and not cls.roster.is_enrolled(actor.user_id):
            raise AuthorizationError("Forbidden, not class teacher")

        students = []
        for sid in cls.student_ids:
            user = self._users.get_by_id(sid)
            if user:
                students.append({"_id": user.user_id, "name": user.name, "email": user.email})

        return {
            "_id": cls.class_id,
            "className": cls.name,
            "teacherId": cls.teacher_id,
            "students": students,
        }

    def list_my_classes(self, actor: Identity) -> list[dict]:
        return [
            {**c.summary_view(), "studentCount": len(c.student_ids)}
            for c in self._classes.list_for_teacher(actor.user_id)
        ]

    def list_enrolled(self, actor: Identity) -> list[dict]:
        out: list[dict] = []
        for c in self._classes.list_for_student(actor.user_id):
            teacher = self._users.get_by_id(c.teacher_id)
            out.append(
                {
                    "_id": c.class_id,
                    "className": c.name,
                    "teacher": teacher.public_view() if teacher else {"_id": c.teacher_id},
                }
            )
        return out
