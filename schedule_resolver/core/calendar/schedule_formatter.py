"""
Schedule Formatter - status-annotated schedule listings

Renders provider events as numbered chat lines:

    1. ✅ ~~09:00-10:00~~ | Standup      (finished)
    2. 🔥 10:30-11:30 | Design review   (in progress)
    3. ☑️ 14:00-15:00 | 1:1            (upcoming)

and groups them by calendar for the full schedule reply.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pytz

from ...utils.config import Config
from ...utils.logger import setup_logger
from ..base.exceptions import InvalidEventTimeError
from .models import CalendarEvent, UNKNOWN_CALENDAR
from .utils import (
    as_instant,
    format_event_date_display,
    format_event_time_display,
    get_user_timezone,
)

logger = setup_logger(__name__)

STATUS_DONE = '✅'
STATUS_ONGOING = '🔥'
STATUS_UPCOMING = '☑️'
STATUS_UNKNOWN = '❓'

# Windows covering a single day; anything else gets dates on timed events
SINGLE_DAY_LABELS = {'today', 'yesterday', 'tomorrow'}

DisplayEvent = Union[CalendarEvent, Dict[str, Any]]


class ScheduleFormatter:
    """
    Format events relative to an explicit ``now``.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.timezone = get_user_timezone(self.config)

    def format_event(
        self,
        event: DisplayEvent,
        index: int,
        range_label: str,
        now: datetime
    ) -> str:
        """
        Format one event as a numbered, status-annotated line.

        Args:
            event: CalendarEvent or raw Google Calendar API event dict
            index: Display number
            range_label: Window description (e.g. "today", "next week");
                multi-day windows prefix timed events with their date
            now: Current instant

        Returns:
            "{index}. {status} {time} | {title}"
        """
        try:
            calendar_event = self._coerce(event)
            if calendar_event.is_all_day:
                status, when = self._all_day_status(calendar_event, now)
            else:
                status, when = self._timed_status(calendar_event, range_label, now)
        except (InvalidEventTimeError, AttributeError, TypeError, ValueError) as e:
            logger.warning("event_format_failed", index=index, error=str(e))
            return f"{index}. {STATUS_UNKNOWN} Unknown Event"

        return f"{index}. {status} {when} | {calendar_event.title}"

    def group_by_calendar(self, events: Iterable[DisplayEvent]) -> Dict[str, List[DisplayEvent]]:
        """
        Group events by calendar name.

        Calendars appear in first-seen order; events keep provider order
        within each calendar.
        """
        grouped: Dict[str, List[DisplayEvent]] = {}
        for event in events:
            if isinstance(event, CalendarEvent):
                name = event.calendar_name
            else:
                name = event.get('calendarName') if isinstance(event, dict) else None
            grouped.setdefault(name or UNKNOWN_CALENDAR, []).append(event)
        return grouped

    def format_schedule(
        self,
        events: Iterable[DisplayEvent],
        range_label: str,
        now: datetime
    ) -> str:
        """
        Render the full schedule reply for a listing request.

        Event numbers run continuously across calendar groups.
        """
        lines = [f"📅 Your Complete Schedule - {range_label}", ""]

        grouped = self.group_by_calendar(events)
        if not grouped:
            lines.append(f"No events scheduled for {range_label}.")
            return "\n".join(lines)

        number = 1
        for calendar_name, calendar_events in grouped.items():
            lines.append(f"📅 {calendar_name}")
            for event in calendar_events:
                lines.append(self.format_event(event, number, range_label, now))
                number += 1
            lines.append("")

        return "\n".join(lines).rstrip("\n")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _coerce(self, event: DisplayEvent) -> CalendarEvent:
        if isinstance(event, CalendarEvent):
            return event
        return CalendarEvent.from_api(event, tz_name=self.timezone)

    def _timed_status(self, event: CalendarEvent, range_label: str, now: datetime) -> Tuple[str, str]:
        tz = pytz.timezone(self.timezone)
        start = as_instant(event.start, self.timezone).astimezone(tz)
        end = as_instant(event.end, self.timezone).astimezone(tz)
        current = as_instant(now, self.timezone)

        span = f"{format_event_time_display(start)}-{format_event_time_display(end)}"
        if range_label not in SINGLE_DAY_LABELS:
            span = f"{start.strftime('%d/%m')} {span}"

        if current > end:
            return STATUS_DONE, f"~~{span}~~"
        if start <= current <= end:
            return STATUS_ONGOING, span
        return STATUS_UPCOMING, span

    def _all_day_status(self, event: CalendarEvent, now: datetime) -> Tuple[str, str]:
        day = format_event_date_display(event.start)
        if as_instant(now, self.timezone) > as_instant(event.start, self.timezone):
            return STATUS_DONE, f"~~{day}~~"
        return STATUS_UPCOMING, day


_default_formatter: Optional[ScheduleFormatter] = None


def get_schedule_formatter() -> ScheduleFormatter:
    """Get or create the shared formatter (lazy initialization)."""
    global _default_formatter
    if _default_formatter is None:
        _default_formatter = ScheduleFormatter()
    return _default_formatter


def format_event(event: DisplayEvent, index: int, range_label: str, now: datetime) -> str:
    """Format one event with the shared formatter."""
    return get_schedule_formatter().format_event(event, index, range_label, now)


def format_schedule(events: Iterable[DisplayEvent], range_label: str, now: datetime) -> str:
    """Render a full schedule with the shared formatter."""
    return get_schedule_formatter().format_schedule(events, range_label, now)
