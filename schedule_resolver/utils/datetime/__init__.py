"""
Date/Time Utilities

Day-boundary helpers plus time-of-day and duration parsing.
"""

from .datetime_helpers import (
    start_of_week,
    is_valid_day,
    last_day_of_month,
    build_date,
    parse_iso_date,
)
from .time_parser import (
    normalize_time,
    parse_time,
    parse_duration_minutes,
    is_valid_time,
)

__all__ = [
    "start_of_week",
    "is_valid_day",
    "last_day_of_month",
    "build_date",
    "parse_iso_date",
    "normalize_time",
    "parse_time",
    "parse_duration_minutes",
    "is_valid_time",
]
