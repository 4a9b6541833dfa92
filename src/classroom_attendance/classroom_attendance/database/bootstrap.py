from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"
DEMO_TEACHER = ("Demo Teacher", "teacher@example.com")
DEMO_STUDENTS = (
    ("Student One", "student1@example.com"),
    ("Student Two", "student2@example.com"),
    ("Student Three", "student3@example.com"),
)
DEMO_CLASS_NAME = "Demo Class"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.strip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema file on ';' outside of quoted strings."""

    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_all(cur, statements: Iterable[str]) -> int:
    count = 0
    for stmt in statements:
        cur.execute(stmt)
        count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        count = _exec_all(cur, iter_sql_statements(sql))
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements from %s", count, schema_path)


def ensure_demo_data(db_config: dict) -> int:
    """Create (or refresh) a demo teacher, three students and one class.

    Returns the demo class id.
    """

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True, buffered=True)
        password_hash = generate_password_hash(DEMO_PASSWORD)

        def upsert_user(name: str, email: str, role: str) -> int:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, role=%s WHERE user_id=%s",
                    (name, password_hash, role, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                "INSERT INTO users (name, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                (name, email, password_hash, role),
            )
            return int(cur.lastrowid)

        teacher_id = upsert_user(*DEMO_TEACHER, "teacher")
        student_ids = [upsert_user(name, email, "student") for name, email in DEMO_STUDENTS]

        cur.execute("SELECT class_id FROM classes WHERE name=%s AND teacher_id=%s", (DEMO_CLASS_NAME, teacher_id))
        row = cur.fetchone()
        if row:
            class_id = int(row["class_id"])
        else:
            cur.execute("INSERT INTO classes (name, teacher_id) VALUES (%s, %s)", (DEMO_CLASS_NAME, teacher_id))
            class_id = int(cur.lastrowid)

        for student_id in student_ids:
            cur.execute(
                "INSERT IGNORE INTO class_students (class_id, student_id) VALUES (%s, %s)",
                (class_id, student_id),
            )

        conn.commit()
    finally:
        conn.close()

    logger.info("Demo data ready (class_id=%s)", class_id)
    return class_id


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
