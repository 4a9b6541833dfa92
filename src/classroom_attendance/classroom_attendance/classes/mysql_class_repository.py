from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_pk
from .model import Classroom, Roster
from .repository import ClassRepository


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _student_ids(self, cur, class_pk: int) -> tuple[str, ...]:
        cur.execute(
            "SELECT student_id FROM class_students WHERE class_id=%s ORDER BY student_id",
            (class_pk,),
        )
        return tuple(str(r["student_id"]) for r in fetchall(cur))

    def _hydrate(self, cur, rows: list[dict]) -> list[Classroom]:
        return [
            Classroom(
                class_id=str(r["class_id"]),
                name=r["name"],
                teacher_id=str(r["teacher_id"]),
                student_ids=self._student_ids(cur, int(r["class_id"])),
            )
            for r in rows
        ]

    def get_by_id(self, class_id: str) -> Optional[Classroom]:
        pk = to_pk(class_id)
        if pk is None:
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id, name, teacher_id FROM classes WHERE class_id=%s", (pk,))
            row = fetchone(cur)
            if not row:
                return None
            return self._hydrate(cur, [row])[0]

    def get_roster(self, class_id: str) -> Optional[Roster]:
        cls = self.get_by_id(class_id)
        return cls.roster if cls else None

    def create_class(self, *, name: str, teacher_id: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(name, teacher_id) VALUES(%s,%s)",
                (name, to_pk(teacher_id)),
            )
            return str(cur.lastrowid)

    def add_student(self, *, class_id: str, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO class_students(class_id, student_id) VALUES(%s,%s)",
                (to_pk(class_id), to_pk(student_id)),
            )
            return cur.rowcount > 0

    def remove_student(self, *, class_id: str, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM class_students WHERE class_id=%s AND student_id=%s",
                (to_pk(class_id), to_pk(student_id)),
            )
            return cur.rowcount > 0

    def list_for_teacher(self, teacher_id: str) -> Sequence[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, name, teacher_id FROM classes WHERE teacher_id=%s ORDER BY class_id",
                (to_pk(teacher_id),),
            )
            return self._hydrate(cur, fetchall(cur))

    def list_for_student(self, student_id: str) -> Sequence[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.class_id, c.name, c.teacher_id
                FROM classes c
                JOIN class_students cs ON cs.class_id = c.class_id
                WHERE cs.student_id=%s
                ORDER BY c.class_id
                """,
                (to_pk(student_id),),
            )
            return self._hydrate(cur, fetchall(cur))
