from __future__ import annotations

import argparse
import importlib
from pathlib import Path
from typing import Optional, Sequence

from config import get_settings_module

from .bootstrap import DEMO_PASSWORD, DEMO_STUDENTS, DEMO_TEACHER, apply_schema, ensure_demo_data, list_tables

DEFAULT_SCHEMA = Path("database") / "schema.sql"


def _describe(db_config: dict) -> str:
    return (
        f"{db_config.get('user')}@{db_config.get('host')}:"
        f"{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


def init_db(db_config: dict, schema_path: Path) -> None:
    apply_schema(db_config, schema_path=schema_path)
    tables = list_tables(db_config)
    print(f"OK: Applied {schema_path.name} -> {_describe(db_config)} (tables={len(tables)})")


def seed_db(db_config: dict) -> None:
    class_id = ensure_demo_data(db_config)
    print(f"OK: Seeded {db_config.get('database')} (demo class id={class_id})")
    print(f"  teacher: {DEMO_TEACHER[1]} / {DEMO_PASSWORD}")
    for _, email in DEMO_STUDENTS:
        print(f"  student: {email} / {DEMO_PASSWORD}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Classroom attendance database tools")
    sub = parser.add_subparsers(dest="command", required=True)
    init = sub.add_parser("init", help="Create the database and apply the schema")
    init.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA, help="Path to schema.sql")
    init.add_argument("--seed", action="store_true", help="Also insert the demo teacher, students and class")
    sub.add_parser("seed", help="Insert the demo teacher, students and class")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if args.command == "init":
        init_db(db_config, args.schema)
        if args.seed:
            seed_db(db_config)
    else:
        seed_db(db_config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
