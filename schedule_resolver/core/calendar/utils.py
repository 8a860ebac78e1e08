"""
Calendar Utilities - Shared helper functions for calendar operations

This module provides reusable utilities for:
- Timezone handling and localisation
- Provider event time parsing
- Candidate interval construction
- Conflict detection helpers
"""
from typing import Optional, Dict, Any, Tuple, Union
from datetime import date, datetime, timedelta
import pytz
from dateutil import parser as date_parser

from ...utils.config import Config, ConfigDefaults, get_timezone
from ...utils.datetime import parse_iso_date, parse_time, parse_duration_minutes
from ...utils.datetime.time_parser import split_time
from ...utils.logger import setup_logger
from ..base.exceptions import InvalidReferenceDateError

logger = setup_logger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_TIMEZONE = ConfigDefaults.TIMEZONE_DEFAULT
DEFAULT_DURATION_MINUTES = ConfigDefaults.DEFAULT_DURATION_MINUTES

EventTime = Union[datetime, date]


# ============================================================================
# TIMEZONE HELPERS
# ============================================================================

def get_user_timezone(config: Optional[Config] = None) -> str:
    """
    Get the configured timezone, with a sensible default.

    Args:
        config: Optional configuration object

    Returns:
        Timezone string (e.g., "Europe/Berlin")
    """
    if config:
        tz = get_timezone(config)
        if tz:
            return tz
    return DEFAULT_TIMEZONE


def get_utc_now() -> datetime:
    """
    Get current UTC time with timezone info.
    """
    return datetime.now(pytz.UTC)


def localize(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    Attach (naive) or convert (aware) a datetime to the given zone.
    """
    tz = pytz.timezone(tz_name or DEFAULT_TIMEZONE)
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def start_of_day_in_zone(day: date, tz_name: Optional[str] = None) -> datetime:
    """Local midnight of ``day`` in the given zone."""
    return localize(datetime.combine(day, datetime.min.time()), tz_name)


def parse_reference_date(value: Union[date, datetime, str]) -> date:
    """
    Coerce a caller-supplied reference date.

    Accepts a date, a datetime (its calendar date is used) or a YYYY-MM-DD
    string.

    Raises:
        InvalidReferenceDateError: if a string isn't a real YYYY-MM-DD day
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    parsed = parse_iso_date(value) if isinstance(value, str) else None
    if parsed is None:
        raise InvalidReferenceDateError(f"Invalid reference date: {value!r}")
    return parsed


# ============================================================================
# EVENT TIME PARSING
# ============================================================================

def parse_event_time(
    event_time_obj: Optional[Dict[str, Any]],
    tz_name: Optional[str] = None
) -> Optional[EventTime]:
    """
    Parse event time from Google Calendar API format.

    Handles both dateTime (with time) and date (all-day) formats.

    Args:
        event_time_obj: Event time object from Google Calendar API
            Format: {'dateTime': '2025-01-15T14:00:00+01:00'} or {'date': '2025-01-15'}
        tz_name: Zone for naive dateTime values (the object's own 'timeZone'
            wins when present)

    Returns:
        Aware datetime, a date for all-day events, or None if parsing fails
    """
    if not event_time_obj:
        return None

    date_time = event_time_obj.get('dateTime')
    if date_time:
        try:
            parsed = date_parser.isoparse(date_time)
        except (ValueError, TypeError):
            return None
        if parsed.tzinfo is None:
            parsed = localize(parsed, event_time_obj.get('timeZone') or tz_name)
        return parsed

    date_only = event_time_obj.get('date')
    if date_only:
        return parse_iso_date(date_only)

    return None


def as_instant(value: EventTime, tz_name: Optional[str] = None) -> datetime:
    """
    Turn an event time into an aware datetime.

    All-day dates become local midnight; naive datetimes are localised.
    """
    if isinstance(value, datetime):
        return localize(value, tz_name) if value.tzinfo is None else value
    return start_of_day_in_zone(value, tz_name)


def format_event_time_display(dt: datetime) -> str:
    """
    Format a datetime as a 24-hour clock time (e.g., "14:00").
    """
    return dt.strftime('%H:%M')


def format_event_date_display(day: date) -> str:
    """
    Format a date day-first (e.g., "16/11/2025").
    """
    return day.strftime('%d/%m/%Y')


# ============================================================================
# CANDIDATE INTERVALS
# ============================================================================

def build_event_interval(
    event_date: str,
    start_time: Optional[str],
    end_time: Optional[str] = None,
    duration: Optional[str] = None,
    timezone: Optional[str] = None,
    default_duration_minutes: Optional[int] = None,
    config: Optional[Config] = None
) -> Optional[Tuple[datetime, datetime]]:
    """
    Build the start/end instants of a new event from extracted fields.

    Args:
        event_date: Date in YYYY-MM-DD format
        start_time: Start time in any form parse_time understands
        end_time: Optional end time; when missing or invalid it is derived
            from ``duration``
        duration: Optional duration phrase (e.g. "45 minutes")
        timezone: Zone the wall-clock times are expressed in; defaults to
            the configured zone
        default_duration_minutes: Used when neither end time nor a
            recognisable duration is given, and to repair an end time that
            isn't after the start; defaults to
            ``config.calendar.default_duration_minutes``
        config: Optional configuration object

    Returns:
        (start, end) aware datetimes, or None if the date or start time is invalid
    """
    if default_duration_minutes is None:
        default_duration_minutes = (
            config.calendar.default_duration_minutes if config else DEFAULT_DURATION_MINUTES
        )
    tz_name = timezone or get_user_timezone(config)

    day = parse_iso_date(event_date)
    if day is None:
        logger.warning("invalid_event_date", event_date=event_date)
        return None

    start_clean = parse_time(start_time)
    if start_clean is None:
        logger.warning("invalid_start_time", event_date=event_date, start_time=start_time)
        return None

    hour, minute = split_time(start_clean)
    start = localize(datetime(day.year, day.month, day.day, hour, minute), tz_name)

    end_clean = parse_time(end_time)
    if end_clean is not None:
        end_hour, end_minute = split_time(end_clean)
        end = localize(datetime(day.year, day.month, day.day, end_hour, end_minute), tz_name)
    else:
        minutes = parse_duration_minutes(duration, default=default_duration_minutes)
        end = start + timedelta(minutes=minutes)

    if end <= start:
        logger.info(
            "end_before_start_repaired",
            start=start.isoformat(),
            end=end.isoformat(),
            minutes=default_duration_minutes
        )
        end = start + timedelta(minutes=default_duration_minutes)

    return start, end


# ============================================================================
# CONFLICT DETECTION
# ============================================================================

def events_overlap(
    start1: datetime,
    end1: datetime,
    start2: datetime,
    end2: datetime
) -> bool:
    """
    Check if two half-open time ranges [start, end) overlap.
    """
    return start1 < end2 and start2 < end1
