"""
DateTime Helper Utilities

Centralized date/datetime manipulation functions shared by the resolver,
the range calculator and the schedule formatter.
"""
import calendar
import re
from datetime import date, timedelta
from typing import Optional

ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Window ends carry millisecond precision, matching provider timestamps
END_OF_DAY_MICROSECOND = 999000


def start_of_week(day: date) -> date:
    """
    Monday of the week containing ``day``.

    ``date.weekday()`` is already Monday-based, so a Sunday steps back six
    days rather than forward one.
    """
    return day - timedelta(days=day.weekday())


def is_valid_day(value: Optional[int]) -> bool:
    """Check if a number could be a day of month (1-31)."""
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 31


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def build_date(year: int, month: int, day: int) -> Optional[date]:
    """Construct a date, or None when the components don't form a real day."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Strict YYYY-MM-DD validation.

    The string must match the pattern and round-trip through date
    construction ("2025-02-30" is rejected).

    Args:
        value: Candidate date string

    Returns:
        Parsed date or None
    """
    if not value or not isinstance(value, str):
        return None

    if not ISO_DATE_PATTERN.match(value):
        return None

    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return None

    return parsed if parsed.isoformat() == value else None
