"""
Core business logic modules

Pure date resolution, range, conflict and formatting logic. No network I/O:
provider events are fetched by the caller and passed in.
"""

from .calendar import (
    DateExpressionResolver,
    RangeCalculator,
    ConflictDetector,
    ScheduleFormatter,
)

__all__ = [
    'DateExpressionResolver',
    'RangeCalculator',
    'ConflictDetector',
    'ScheduleFormatter',
]
