from __future__ import annotations

from datetime import date, timezone
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_pk
from .model import AttendanceRecord
from .repository import AttendanceRepository

_RECORD_COLUMNS = "class_id, student_id, session_date, status, recorded_at"


def _to_record(row: dict) -> AttendanceRecord:
    recorded_at = row["recorded_at"]
    if recorded_at.tzinfo is None:
        recorded_at = recorded_at.replace(tzinfo=timezone.utc)
    return AttendanceRecord(
        class_id=str(row["class_id"]),
        student_id=str(row["student_id"]),
        status=AttendanceStatus(row["status"]),
        session_date=row["session_date"],
        recorded_at=recorded_at,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save_session(self, *, class_id: str, session_date: date, records: Sequence[AttendanceRecord]) -> int:
        class_pk = to_pk(class_id)
        keep = [to_pk(r.student_id) for r in records]
        rows = [
            (
                to_pk(r.class_id),
                to_pk(r.student_id),
                r.session_date,
                r.status.value,
                # DATETIME columns hold naive UTC
                r.recorded_at.astimezone(timezone.utc).replace(tzinfo=None),
            )
            for r in records
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            # students no longer enrolled lose that day's row
            if keep:
                placeholders = ",".join(["%s"] * len(keep))
                cur.execute(
                    f"""
                    DELETE FROM attendance_records
                    WHERE class_id=%s AND session_date=%s AND student_id NOT IN ({placeholders})
                    """,
                    (class_pk, session_date, *keep),
                )
            else:
                cur.execute(
                    "DELETE FROM attendance_records WHERE class_id=%s AND session_date=%s",
                    (class_pk, session_date),
                )

            if rows:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(class_id, student_id, session_date, status, recorded_at)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status), recorded_at=VALUES(recorded_at)
                    """,
                    rows,
                )
        return len(rows)

    def get_latest_for_student(self, *, class_id: str, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE class_id=%s AND student_id=%s
                ORDER BY session_date DESC, recorded_at DESC
                LIMIT 1
                """,
                (to_pk(class_id), to_pk(student_id)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list_for_class(self, *, class_id: str, session_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE class_id=%s AND session_date=%s
                ORDER BY student_id
                """,
                (to_pk(class_id), session_date),
            )
            return [_to_record(r) for r in fetchall(cur)]
