from __future__ import annotations

from pathlib import Path

import pytest

from src.classroom_attendance.classroom_attendance.database import cli


@pytest.fixture
def calls(monkeypatch):
    seen = []
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(cli, "apply_schema", lambda cfg, *, schema_path: seen.append(("schema", cfg["database"], schema_path)))
    monkeypatch.setattr(cli, "list_tables", lambda cfg: ["users", "classes"])
    monkeypatch.setattr(cli, "ensure_demo_data", lambda cfg: seen.append(("seed", cfg["database"])) or 7)
    return seen


def test_init_applies_schema_from_testing_settings(calls, capsys):
    from config import testing

    assert cli.main(["init", "--schema", "custom.sql"]) == 0

    assert calls == [("schema", testing.DB_CONFIG["database"], Path("custom.sql"))]
    assert "tables=2" in capsys.readouterr().out


def test_init_with_seed_runs_both_steps(calls):
    cli.main(["init", "--seed"])
    assert [c[0] for c in calls] == ["schema", "seed"]
    assert calls[0][2] == cli.DEFAULT_SCHEMA


def test_seed_prints_demo_accounts(calls, capsys):
    cli.main(["seed"])

    out = capsys.readouterr().out
    assert "demo class id=7" in out
    assert "teacher@example.com" in out
    assert [c[0] for c in calls] == ["seed"]


def test_command_is_required(calls):
    with pytest.raises(SystemExit):
        cli.main([])
