"""
Time-of-day cleanup and duration parsing

Turns the loose time strings coming out of chat extraction ("2:30pm",
"930", "9 am") into canonical HH:MM, and duration phrases ("45 minutes",
"2 hours") into minutes.
"""
import re
from typing import Optional, Tuple

from ..logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_TIME = "12:00"

TIME_PATTERN = re.compile(r'^([01]?\d|2[0-3]):([0-5]\d)$')
AMPM_PATTERN = re.compile(r'(\d{1,2})(?::(\d{2}))?\s*(am|pm)', re.IGNORECASE)
DURATION_NUMBER_PATTERN = re.compile(r'(\d+)')


def is_valid_time(value: Optional[str]) -> bool:
    """Validate HH:MM (24-hour) format."""
    if not value or not isinstance(value, str):
        return False
    return TIME_PATTERN.match(value) is not None


def split_time(value: str) -> Tuple[int, int]:
    """Split a valid HH:MM string into (hour, minute)."""
    hours, minutes = value.split(':')
    return int(hours), int(minutes)


def parse_time(raw: Optional[str]) -> Optional[str]:
    """
    Clean a user-typed time string into HH:MM.

    Supports:
    - "14:30" (already valid, returned zero-padded)
    - "2pm", "2:30 PM", "12am"
    - bare hours like "9" or "17"
    - digit runs like "930" or "1745" (padded to 4 digits, first two are
      hours, last two minutes; both clamped)

    Returns:
        HH:MM string, or None when nothing time-like is found

    Examples:
        >>> parse_time("2:30pm")
        '14:30'
        >>> parse_time("930")
        '09:30'
    """
    if not raw or not isinstance(raw, str):
        return None

    text = raw.strip()

    if is_valid_time(text):
        hour, minute = split_time(text)
        return f"{hour:02d}:{minute:02d}"

    ampm_match = AMPM_PATTERN.search(text)
    if ampm_match:
        hour = int(ampm_match.group(1))
        minute = int(ampm_match.group(2)) if ampm_match.group(2) else 0
        period = ampm_match.group(3).lower()

        if period == 'pm' and hour != 12:
            hour += 12
        if period == 'am' and hour == 12:
            hour = 0

        return f"{min(hour, 23):02d}:{min(minute, 59):02d}"

    digits = re.sub(r'\D', '', text)
    if not digits or len(digits) > 4:
        return None

    if len(digits) <= 2:
        return f"{min(int(digits), 23):02d}:00"

    padded = digits.zfill(4)
    hour = min(23, int(padded[:2]))
    minute = min(59, int(padded[2:]))

    return f"{hour:02d}:{minute:02d}"


def normalize_time(raw: Optional[str]) -> str:
    """Like parse_time, but falls back to noon for unrecognised input."""
    cleaned = parse_time(raw)
    if cleaned is None:
        logger.debug("time_fallback", raw=raw, result=DEFAULT_TIME)
        return DEFAULT_TIME
    return cleaned


def parse_duration_minutes(text: Optional[str], default: int = 60) -> int:
    """
    Parse a duration phrase into minutes.

    Args:
        text: Duration string (e.g., "45 minutes", "1 hour", "2h", "30 mins")
        default: Minutes to use when no number/unit is recognised

    Returns:
        Duration in minutes
    """
    if not text or not isinstance(text, str):
        return default

    lowered = text.lower()
    match = DURATION_NUMBER_PATTERN.search(lowered)
    if not match:
        return default

    value = int(match.group(1))

    if 'hour' in lowered or 'hr' in lowered or re.search(r'\d\s*h\b', lowered):
        return value * 60
    if 'min' in lowered or re.search(r'\d\s*m\b', lowered):
        return value

    return default
