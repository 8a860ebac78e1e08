"""
schedule_resolver - date expression resolution and scheduling-conflict detection
"""

from .core.calendar import (
    CalendarEvent,
    ConflictKind,
    ConflictRecord,
    EventCandidate,
    ResolutionMethod,
    ResolutionResult,
    TimeRangeWindow,
    build_event_interval,
    classify,
    find_conflicts,
    format_event,
    format_schedule,
    resolve,
    window_for,
)

__version__ = "0.1.0"

__all__ = [
    'CalendarEvent',
    'ConflictKind',
    'ConflictRecord',
    'EventCandidate',
    'ResolutionMethod',
    'ResolutionResult',
    'TimeRangeWindow',
    'build_event_interval',
    'classify',
    'find_conflicts',
    'format_event',
    'format_schedule',
    'resolve',
    'window_for',
]
