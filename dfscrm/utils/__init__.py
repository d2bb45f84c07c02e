"""Shared utility helpers used across connectors and services."""

from datetime import date, datetime


def parse_iso_date(v) -> date | None:
    """Parse an ISO-8601 date or datetime string (or date object) to a date.

    Returns None for empty or unparseable values. Only the leading
    ``YYYY-MM-DD`` part of a timestamp is used.
    """
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return date.fromisoformat(str(v).strip()[:10])
    except ValueError:
        return None
