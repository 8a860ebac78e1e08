"""
Calendar data models

Transient value objects passed between the resolver, range calculator,
conflict detector and schedule formatter. Nothing here is persisted or
mutated after construction.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..base.exceptions import InvalidEventTimeError
from .utils import EventTime, parse_event_time

UNKNOWN_CALENDAR = "Unknown Calendar"
UNTITLED_EVENT = "Untitled Event"


class ResolutionMethod(str, Enum):
    """Which resolution strategy produced a ResolutionResult."""
    DEFAULT = "default"
    RELATIVE_TODAY = "relative_today"
    RELATIVE_TOMORROW = "relative_tomorrow"
    DATE_RANGE_DETECTED = "date_range_detected"
    MALFORMED_SPECIAL_CASE = "malformed_special_case"
    MALFORMED_DDMM_FIXED = "malformed_ddmm_fixed"
    MALFORMED_DDMMYYYY_FIXED = "malformed_ddmmyyyy_fixed"
    NATURAL_LANGUAGE = "natural_language"
    VALID_STANDARD = "valid_standard"
    EXTRACTED_DAY = "extracted_day"
    FALLBACK_WITH_CLARIFICATION = "fallback_with_clarification"


class ConflictKind(str, Enum):
    """Severity of a scheduling conflict."""
    DUPLICATE = "duplicate"  # hard gate: candidate is rejected
    OVERLAP = "overlap"      # advisory: candidate is still created


@dataclass(frozen=True)
class ResolutionContext:
    """Hints that travel with a raw date string."""
    event_title: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_value(cls, value: Union["ResolutionContext", Dict[str, Any], None]) -> "ResolutionContext":
        """Accept an existing context, a camelCase/snake_case dict, or None."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls()
        return cls(
            event_title=value.get("eventTitle", value.get("event_title")),
            category=value.get("category"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.event_title is not None:
            result["eventTitle"] = self.event_title
        if self.category is not None:
            result["category"] = self.category
        return result


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one raw date string."""
    date: Optional[str]
    method: ResolutionMethod
    description: str
    timestamp: str
    end_date: Optional[str] = None
    is_range: bool = False
    needs_clarification: bool = False
    clarification_message: Optional[str] = None
    context: ResolutionContext = field(default_factory=ResolutionContext)

    @property
    def parsed(self) -> bool:
        return not self.needs_clarification

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase contract consumed by the CRUD layer."""
        return {
            "date": self.date,
            "endDate": self.end_date,
            "isRange": self.is_range,
            "method": self.method.value,
            "description": self.description,
            "needsClarification": self.needs_clarification,
            "clarificationMessage": self.clarification_message,
            "parsed": self.parsed,
            "context": self.context.to_dict(),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class TimeRangeWindow:
    """A calendar query window, both ends day-aligned in the configured zone."""
    time_min: datetime
    time_max: datetime
    time_range_description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeMin": self.time_min.isoformat(timespec="milliseconds"),
            "timeMax": self.time_max.isoformat(timespec="milliseconds"),
            "timeRangeDescription": self.time_range_description,
        }


@dataclass(frozen=True)
class CalendarEvent:
    """
    Read-only view of a provider event.

    ``start``/``end`` are aware datetimes for timed events and plain dates
    for all-day events.
    """
    id: Optional[str]
    title: str
    start: EventTime
    end: Optional[EventTime]
    location: Optional[str] = None
    calendar_name: Optional[str] = None

    @property
    def is_all_day(self) -> bool:
        return not isinstance(self.start, datetime)

    @classmethod
    def from_api(
        cls,
        event: Dict[str, Any],
        calendar_name: Optional[str] = None,
        tz_name: Optional[str] = None
    ) -> "CalendarEvent":
        """
        Build from a Google Calendar API event (``summary``) or our internal
        format (``title``).

        Raises:
            InvalidEventTimeError: if the start can't be parsed
        """
        start = parse_event_time(event.get("start") or {}, tz_name)
        if start is None:
            raise InvalidEventTimeError(f"Event {event.get('id', 'unknown')} has no usable start time")
        end = parse_event_time(event.get("end") or {}, tz_name)

        return cls(
            id=event.get("id"),
            title=event.get("title") or event.get("summary") or UNTITLED_EVENT,
            start=start,
            end=end,
            location=event.get("location") or None,
            calendar_name=calendar_name or event.get("calendarName"),
        )


@dataclass(frozen=True)
class EventCandidate:
    """An event the user wants to create, not yet persisted."""
    title: str
    start: datetime
    end: datetime
    location: Optional[str] = None


@dataclass(frozen=True)
class ConflictRecord:
    """A candidate paired with the existing event it collides with."""
    candidate: EventCandidate
    existing: CalendarEvent
    kind: ConflictKind

    @property
    def is_duplicate(self) -> bool:
        return self.kind is ConflictKind.DUPLICATE
