"""
Calendar-day utilities.

The grid works in whole days. Datetimes and ISO strings coming from legacy
records are normalized to ``date`` before any arithmetic.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Normalize a date-like value to a calendar day.

    Handles:
    - ``date`` objects (returned as-is)
    - ``datetime`` objects (time part dropped)
    - ISO strings: "2025-01-05", "2025-01-05T09:00:00Z"

    Raises:
        ValueError: If the string cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    normalized = value.strip().replace("Z", "+00:00")
    if "T" in normalized or " " in normalized:
        return datetime.fromisoformat(normalized).date()
    return date.fromisoformat(normalized)


def days_between(start: date, end: date) -> int:
    """Signed number of whole days from ``start`` to ``end``."""
    return (end - start).days


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def each_day(start: date, end: date) -> Iterator[date]:
    """
    Yield every day from ``start`` to ``end`` inclusive.

    Yields nothing when ``end`` is before ``start``.

    Example:
        >>> list(each_day(date(2025, 1, 1), date(2025, 1, 3)))
        [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
    """
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def format_day(day: date) -> str:
    """ISO representation used in log lines and rejection reasons."""
    return day.isoformat()
