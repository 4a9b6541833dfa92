from __future__ import annotations

import pytest

from src.classroom_attendance.classroom_attendance.classes.service import ClassService
from src.classroom_attendance.classroom_attendance.core.enums import Role
from src.classroom_attendance.classroom_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.classroom_attendance.classroom_attendance.users.model import Identity


@pytest.fixture
def setup(users, classes):
    teacher = users.add(name="Teacher", email="t@b.co", role=Role.TEACHER)
    other = users.add(name="Other", email="o@b.co", role=Role.TEACHER)
    student = users.add(name="Stu", email="s@b.co", role=Role.STUDENT)
    service = ClassService(classes, users)
    return (
        service,
        Identity(user_id=teacher.user_id, role=Role.TEACHER),
        Identity(user_id=other.user_id, role=Role.TEACHER),
        Identity(user_id=student.user_id, role=Role.STUDENT),
    )


def test_create_and_enrol(setup):
    service, teacher, _, student = setup
    cls = service.create_class(teacher, name=" Math ")
    assert cls.name == "Math"

    updated = service.add_student(teacher, class_id=cls.class_id, student_id=student.user_id)
    assert updated.student_ids == (student.user_id,)

    # enrolling twice keeps one entry
    again = service.add_student(teacher, class_id=cls.class_id, student_id=student.user_id)
    assert again.student_ids == (student.user_id,)

    detail = service.get_class_detail(student, cls.class_id)
    assert detail["className"] == "Math"
    assert detail["students"] == [{"_id": student.user_id, "name": "Stu", "email": "s@b.co"}]

    enrolled = service.list_enrolled(student)
    assert enrolled[0]["teacher"]["name"] == "Teacher"


def test_only_owner_can_change_roster(setup):
    service, teacher, other, student = setup
    cls = service.create_class(teacher, name="Math")

    with pytest.raises(AuthorizationError):
        service.add_student(other, class_id=cls.class_id, student_id=student.user_id)
    with pytest.raises(AuthorizationError):
        service.create_class(student, name="Nope")
    with pytest.raises(NotFoundError):
        service.add_student(teacher, class_id="missing", student_id=student.user_id)


def test_teacher_cannot_be_enrolled(setup):
    service, teacher, other, _ = setup
    cls = service.create_class(teacher, name="Math")
    with pytest.raises(NotFoundError, match="Student not found"):
        service.add_student(teacher, class_id=cls.class_id, student_id=other.user_id)


def test_remove_student_and_listing(setup):
    service, teacher, other, student = setup
    cls = service.create_class(teacher, name="Math")
    service.add_student(teacher, class_id=cls.class_id, student_id=student.user_id)

    after = service.remove_student(teacher, class_id=cls.class_id, student_id=student.user_id)
    assert after.student_ids == ()

    mine = service.list_my_classes(teacher)
    assert [(c["className"], c["studentCount"]) for c in mine] == [("Math", 0)]
    assert service.list_my_classes(other) == []

    with pytest.raises(AuthorizationError):
        service.get_class_detail(student, cls.class_id)


def test_class_name_required(setup):
    service, teacher, _, _ = setup
    with pytest.raises(ValidationError):
        service.create_class(teacher, name="")
