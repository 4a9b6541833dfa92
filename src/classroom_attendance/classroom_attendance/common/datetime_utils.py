from __future__ import annotations

from datetime import date, datetime, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/inject a fixed clock.
    """
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")
