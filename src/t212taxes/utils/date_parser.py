"""Timestamp parsing utilities."""

from datetime import datetime, timezone

from dateutil import parser as date_parser


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a ledger timestamp into a naive UTC datetime.

    Supports the export format ("2024-01-15 10:30:00"), ISO 8601 with or
    without an offset, and other formats understood by dateutil.

    Args:
        value: Timestamp string or datetime

    Returns:
        Naive datetime in UTC

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Could not parse timestamp '{value}': expected a string")
    if not value.strip():
        raise ValueError("Empty timestamp")

    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")
    return to_naive_utc(parsed)


def to_naive_utc(value: datetime) -> datetime:
    """Drop timezone information after converting an aware datetime to UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def year_end(year: int) -> datetime:
    """Return the last second of a calendar year (Dec 31, 23:59:59)."""
    return datetime(year, 12, 31, 23, 59, 59)


def month_key(value: datetime) -> str:
    """Return the ``YYYY-MM`` key of a timestamp."""
    return value.strftime("%Y-%m")
