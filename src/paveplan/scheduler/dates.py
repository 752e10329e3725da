"""Date and interval arithmetic at whole-day granularity."""

import math
from datetime import date, timedelta

from paveplan.exceptions import InvalidIntervalError


def days_between(start: date, end: date) -> int:
    """Signed number of whole days from ``start`` to ``end``."""
    return (end - start).days


def shift(day: date, days: int) -> date:
    """Move a date by a whole number of days (negative moves earlier)."""
    return day + timedelta(days=days)


def shift_interval(start: date, end: date, days: int) -> tuple[date, date]:
    """Move both ends of an interval by the same number of days."""
    return (shift(start, days), shift(end, days))


def validate_interval(start: date | None, end: date | None, what: str = "task") -> None:
    """Reject missing dates and intervals that end before they start.

    Raises:
        InvalidIntervalError: If either date is missing or ``end < start``
    """
    if start is None or end is None:
        raise InvalidIntervalError(f"{what} needs both a start and an end date")
    if end < start:
        raise InvalidIntervalError(f"{what} ends ({end}) before it starts ({start})")


def parse_date(value: str | date | None) -> date | None:
    """Parse an ISO date string or pass a date through; None when unparseable."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    This matches the browser's ``Math.round`` (2.5 -> 3, -2.5 -> -2), not
    Python's banker's rounding.
    """
    return math.floor(value + 0.5)


def pixels_to_days(delta_x: float, pixels_per_day: float) -> int:
    """Convert a horizontal pointer displacement into whole days."""
    if pixels_per_day <= 0:
        raise ValueError(f"pixels_per_day must be positive, got {pixels_per_day}")
    return round_half_up(delta_x / pixels_per_day)
