"""
Calendar operations

Main exports:
- DateExpressionResolver / resolve: raw date strings -> ResolutionResult
- RangeCalculator / window_for: time-range tokens -> TimeRangeWindow
- ConflictDetector / classify: duplicate and overlap detection
- ScheduleFormatter / format_event: status-annotated schedule lines
- Utility functions: See utils.py for timezone, parsing, and interval helpers
"""

from .models import (
    CalendarEvent,
    ConflictKind,
    ConflictRecord,
    EventCandidate,
    ResolutionContext,
    ResolutionMethod,
    ResolutionResult,
    TimeRangeWindow,
)
from .date_resolver import DateExpressionResolver, resolve
from .range_calculator import RangeCalculator, window_for
from .conflicts import ConflictDetector, classify, find_conflicts
from .schedule_formatter import ScheduleFormatter, format_event, format_schedule
from .utils import build_event_interval, parse_reference_date

__all__ = [
    'CalendarEvent',
    'ConflictKind',
    'ConflictRecord',
    'EventCandidate',
    'ResolutionContext',
    'ResolutionMethod',
    'ResolutionResult',
    'TimeRangeWindow',
    'DateExpressionResolver',
    'resolve',
    'RangeCalculator',
    'window_for',
    'ConflictDetector',
    'classify',
    'find_conflicts',
    'ScheduleFormatter',
    'format_event',
    'format_schedule',
    'build_event_interval',
    'parse_reference_date',
]
