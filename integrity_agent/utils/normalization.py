"""Normalization helpers (titles, dates)."""

from datetime import date, datetime
from typing import Any, Optional


def normalize_title(value: str) -> str:
    return (value or "").strip().lower()


def parse_date(value: Any) -> Optional[date]:
    """Parse a stored scheduled date (``YYYY-MM-DD`` or a full timestamp)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
