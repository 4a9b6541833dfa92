"""Example: drive a live session through the service layer (no Flask, no DB).

Controllers are thin; the session engine does the work.
"""

from src.classroom_attendance.classroom_attendance.classes.model import Roster
from src.classroom_attendance.classroom_attendance.core.enums import EventType, Role
from src.classroom_attendance.classroom_attendance.session.engine import SessionEngine
from src.classroom_attendance.classroom_attendance.session.registry import SessionRegistry
from src.classroom_attendance.classroom_attendance.users.model import Identity


class DemoRoster:
    def get_roster(self, class_id):
        if class_id != "C1":
            return None
        return Roster(class_id="C1", teacher_id="T1", student_ids=("S1", "S2", "S3"))


class PrintStore:
    def save_session(self, *, class_id, session_date, records):
        for r in records:
            print("  saved", r.student_id, r.status.value)
        return len(records)


class PrintSink:
    def broadcast(self, event: EventType, data: dict) -> None:
        print("broadcast", event.value, data)


def main():
    engine = SessionEngine(SessionRegistry(), DemoRoster(), PrintStore(), events=PrintSink())
    teacher = Identity(user_id="T1", role=Role.TEACHER)
    student = Identity(user_id="S1", role=Role.STUDENT)

    engine.start(teacher, "C1")
    engine.mark(teacher, "S1", "present")
    print("S1 sees:", engine.my_status(student))
    engine.summary(teacher)
    engine.commit(teacher)


if __name__ == "__main__":
    main()
