# core/formatters.py

# all pure utilities & date/datetime helpers
# must never import from models!

import datetime
from typing import Any

# === timestamp helpers ===


def parse_timestamp(value: Any) -> datetime.datetime:
    """
    Normalizes a timestamp input into a `datetime.datetime`.

    Accepts `datetime.datetime` objects unchanged, `datetime.date` objects (as midnight), and ISO 8601
    strings, including the trailing "Z" form produced by JavaScript's `toISOString()`.

    Raises:
        TypeError: If the input is not a datetime, date, or string.
        ValueError: If a string cannot be parsed as ISO 8601.
    """
    if isinstance(value, datetime.datetime):
        return value

    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())

    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO 8601 timestamp string, got {type(value)}.")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        return datetime.datetime.fromisoformat(text)

    except ValueError:
        raise ValueError(f"Invalid timestamp: '{value}'.")


def format_timestamp(value: datetime.datetime | None) -> str | None:
    return value.isoformat() if value else None


def align_to(now: datetime.datetime, other: datetime.datetime) -> datetime.datetime:
    """
    Makes `now` comparable with `other` when exactly one of them carries a timezone.

    Naive values are treated as UTC.
    """
    if (now.tzinfo is None) == (other.tzinfo is None):
        return now

    if now.tzinfo is None:
        return now.replace(tzinfo=datetime.timezone.utc)

    return now.astimezone(datetime.timezone.utc).replace(tzinfo=None)


# === generic text formatters ===


def format_percent(value: float | None) -> str:
    return f"{value:.1f}%" if value is not None else "--"


def format_due_date_from_datetime(due_date_dt: datetime.datetime | None) -> str:
    due_date_str = due_date_dt.strftime("%Y-%m-%d") if due_date_dt else None
    due_time_str = due_date_dt.strftime("%H:%M") if due_date_dt else None

    return (
        f"{due_date_str} at {due_time_str}"
        if due_date_str and due_time_str
        else "[NO DUE DATE]"
    )
