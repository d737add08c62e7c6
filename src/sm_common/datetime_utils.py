"""Datetime helpers for API payloads."""

from datetime import datetime


def to_iso(value: datetime | None) -> str:
    """ISO8601 string; empty string when the DB gave no value."""
    return value.isoformat() if value else ""
