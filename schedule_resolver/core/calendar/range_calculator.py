"""
Range Calculator - Named time ranges to calendar query windows

Turns tokens like "today", "next week" or "next 3 days" plus an explicit
reference date into a [timeMin, timeMax] window. Both ends are day-aligned
in the configured timezone. Unknown tokens degrade to today's window.
"""
import re
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional, Tuple, Union

from ...utils.config import Config
from ...utils.datetime import start_of_week
from ...utils.datetime.datetime_helpers import END_OF_DAY_MICROSECOND
from ...utils.logger import setup_logger
from .models import TimeRangeWindow
from .utils import get_user_timezone, localize, parse_reference_date

logger = setup_logger(__name__)

END_OF_DAY = time(23, 59, 59, END_OF_DAY_MICROSECOND)

# (first_day, last_day, description)
DaySpan = Tuple[date, date, str]
SpanBuilder = Callable[[date, re.Match], DaySpan]


def _yesterday(ref: date, match: re.Match) -> DaySpan:
    day = ref - timedelta(days=1)
    return day, day, 'yesterday'


def _today(ref: date, match: Optional[re.Match] = None) -> DaySpan:
    return ref, ref, 'today'


def _tomorrow(ref: date, match: re.Match) -> DaySpan:
    day = ref + timedelta(days=1)
    return day, day, 'tomorrow'


def _this_week(ref: date, match: re.Match) -> DaySpan:
    monday = start_of_week(ref)
    return monday, monday + timedelta(days=6), 'this week'


def _next_week(ref: date, match: re.Match) -> DaySpan:
    monday = start_of_week(ref) + timedelta(days=7)
    return monday, monday + timedelta(days=6), 'next week'


def _next_days(ref: date, match: re.Match) -> DaySpan:
    days = int(match.group(1))
    return ref, ref + timedelta(days=days - 1), f'the next {days} days'


def _next_weeks(ref: date, match: re.Match) -> DaySpan:
    weeks = int(match.group(1))
    return ref, ref + timedelta(days=7 * weeks - 1), f'the next {weeks} weeks'


# Evaluated in order; first match wins
RANGE_PATTERNS: List[Tuple[re.Pattern, SpanBuilder]] = [
    (re.compile(r'^yesterday$'), _yesterday),
    (re.compile(r'^today$'), _today),
    (re.compile(r'^tomorrow$'), _tomorrow),
    (re.compile(r'^this week$'), _this_week),
    (re.compile(r'^(?:next|upcoming) week$'), _next_week),
    (re.compile(r'^next 0*([1-9]\d*) days$'), _next_days),
    (re.compile(r'^next 0*([1-9]\d*) weeks$'), _next_weeks),
]


class RangeCalculator:
    """
    Compute query windows for time-range tokens.

    ``window_for`` never reads the clock: the reference date is always
    supplied by the caller.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.timezone = get_user_timezone(self.config)

    def window_for(
        self,
        token: Optional[str],
        reference_date: Union[date, datetime, str],
        timezone: Optional[str] = None
    ) -> TimeRangeWindow:
        """
        Compute the window for ``token``.

        Args:
            token: Time-range token (case-insensitive, trimmed); None or empty
                means today
            reference_date: The day the token is relative to
            timezone: Zone for day boundaries; defaults to the configured zone

        Returns:
            TimeRangeWindow spanning whole days

        Raises:
            InvalidReferenceDateError: if ``reference_date`` is a malformed string
            pytz.UnknownTimeZoneError: if an explicit ``timezone`` is unknown
        """
        ref = parse_reference_date(reference_date)
        tz_name = timezone or self.timezone

        first_day, last_day, description = self._span_for(token, ref)

        return TimeRangeWindow(
            time_min=localize(datetime.combine(first_day, time.min), tz_name),
            time_max=localize(datetime.combine(last_day, END_OF_DAY), tz_name),
            time_range_description=description,
        )

    @staticmethod
    def _span_for(token: Optional[str], ref: date) -> DaySpan:
        if not token or not isinstance(token, str) or not token.strip():
            return _today(ref)

        normalized = token.strip().lower()

        for pattern, builder in RANGE_PATTERNS:
            match = pattern.match(normalized)
            if not match:
                continue
            try:
                return builder(ref, match)
            except (OverflowError, ValueError):
                logger.warning("time_range_out_of_bounds", token=token, reference_date=ref.isoformat())
                return _today(ref)

        # A typo silently narrows the query to today
        logger.warning("time_range_unrecognized", token=token, fallback='today')
        return _today(ref)


_default_calculator: Optional[RangeCalculator] = None


def get_range_calculator() -> RangeCalculator:
    """Get or create the shared calculator (lazy initialization)."""
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = RangeCalculator()
    return _default_calculator


def window_for(
    token: Optional[str],
    reference_date: Union[date, datetime, str],
    timezone: Optional[str] = None
) -> TimeRangeWindow:
    """Compute the window for ``token`` with the shared calculator."""
    return get_range_calculator().window_for(token, reference_date, timezone)
