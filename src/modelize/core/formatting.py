"""Value formatting helpers used by the static field types."""

from __future__ import annotations

import uuid
from datetime import date


def generate_identifier() -> str:
    """Return a fresh random identifier (32 lowercase hex chars, no dashes).

    Never memoize: every call must yield a new value.
    """
    return uuid.uuid4().hex


def format_phone(value: str) -> str:
    """Keep a leading '+' and every digit; drop spaces, dots, dashes, etc."""
    kept = [char for index, char in enumerate(value) if char.isdigit() or (index == 0 and char == "+")]
    return "".join(kept)


def format_date_only(value: date) -> str:
    """Render the calendar day as YYYY-MM-DD.

    For datetimes the day is taken as-is, without converting to UTC first.
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
