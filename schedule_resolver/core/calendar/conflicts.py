"""
Conflict Detector - duplicate and overlap classification for new events

Runs against the events the caller already fetched for the candidate's
window. A duplicate is a hard gate (the caller must not create the event);
an overlap is advisory (the event is created and the user is warned).

The check-then-insert sequence is not atomic: two concurrent requests can
both pass the duplicate check before either insert lands. Callers that need
stronger guarantees must serialize creation per calendar or use a
provider-side idempotency key.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ...utils.config import Config
from ...utils.logger import setup_logger
from ..base.exceptions import InvalidEventTimeError
from .models import CalendarEvent, ConflictKind, ConflictRecord, EventCandidate
from .utils import as_instant, events_overlap, get_user_timezone

logger = setup_logger(__name__)

ExistingEvent = Union[CalendarEvent, Dict[str, Any]]


def _normalize_location(location: Optional[str]) -> Optional[str]:
    """Treat missing and blank locations alike."""
    if location is None:
        return None
    stripped = location.strip()
    return stripped or None


class ConflictDetector:
    """
    Classify a candidate event against existing events.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.timezone = get_user_timezone(self.config)

    def classify(
        self,
        candidate: EventCandidate,
        existing_events: Iterable[ExistingEvent]
    ) -> Optional[ConflictRecord]:
        """
        Return the most severe conflict for ``candidate``.

        A duplicate anywhere in the list wins over any overlap; otherwise the
        first overlapping event (in provider order) is reported.

        Returns:
            ConflictRecord, or None when nothing collides
        """
        conflicts = self.find_conflicts(candidate, existing_events)
        for conflict in conflicts:
            if conflict.kind is ConflictKind.DUPLICATE:
                logger.info(
                    "duplicate_event_detected",
                    title=candidate.title,
                    existing_id=conflict.existing.id
                )
                return conflict

        if conflicts:
            logger.info(
                "overlapping_event_detected",
                title=candidate.title,
                existing_id=conflicts[0].existing.id,
                overlap_count=len(conflicts)
            )
            return conflicts[0]

        return None

    def find_conflicts(
        self,
        candidate: EventCandidate,
        existing_events: Iterable[ExistingEvent]
    ) -> List[ConflictRecord]:
        """
        Find every existing event that collides with ``candidate``.

        Args:
            candidate: The event about to be created
            existing_events: CalendarEvent objects or raw Google Calendar API
                event dicts; entries whose times can't be read are skipped

        Returns:
            ConflictRecords in provider order
        """
        cand_start, cand_end = self._candidate_interval(candidate)
        conflicts = []

        for event in self._coerce(existing_events):
            if self.is_duplicate(candidate, event):
                conflicts.append(ConflictRecord(candidate, event, ConflictKind.DUPLICATE))
                continue

            interval = self._event_interval(event)
            if interval and events_overlap(cand_start, cand_end, *interval):
                conflicts.append(ConflictRecord(candidate, event, ConflictKind.OVERLAP))

        return conflicts

    def is_duplicate(self, candidate: EventCandidate, existing: CalendarEvent) -> bool:
        """
        Exact match on title, start instant, end instant and location.
        """
        if existing.is_all_day or existing.end is None:
            return False

        cand_start, cand_end = self._candidate_interval(candidate)
        return (
            candidate.title == existing.title
            and cand_start == as_instant(existing.start, self.timezone)
            and cand_end == as_instant(existing.end, self.timezone)
            and _normalize_location(candidate.location) == _normalize_location(existing.location)
        )

    def _candidate_interval(self, candidate: EventCandidate) -> Tuple[datetime, datetime]:
        return as_instant(candidate.start, self.timezone), as_instant(candidate.end, self.timezone)

    def _event_interval(self, event: CalendarEvent) -> Optional[Tuple[datetime, datetime]]:
        start = as_instant(event.start, self.timezone)
        if event.end is not None:
            end = as_instant(event.end, self.timezone)
        elif event.is_all_day:
            end = start + timedelta(days=1)
        else:
            return None
        return start, end

    def _coerce(self, events: Iterable[ExistingEvent]) -> List[CalendarEvent]:
        coerced = []
        for event in events:
            if isinstance(event, CalendarEvent):
                coerced.append(event)
                continue
            try:
                coerced.append(CalendarEvent.from_api(event, tz_name=self.timezone))
            except InvalidEventTimeError as e:
                logger.warning("skipping_unparsable_event", event_id=event.get('id'), error=str(e))
        return coerced


_default_detector: Optional[ConflictDetector] = None


def get_conflict_detector() -> ConflictDetector:
    """Get or create the shared detector (lazy initialization)."""
    global _default_detector
    if _default_detector is None:
        _default_detector = ConflictDetector()
    return _default_detector


def classify(
    candidate: EventCandidate,
    existing_events: Iterable[ExistingEvent]
) -> Optional[ConflictRecord]:
    """Classify ``candidate`` with the shared detector."""
    return get_conflict_detector().classify(candidate, existing_events)


def find_conflicts(
    candidate: EventCandidate,
    existing_events: Iterable[ExistingEvent]
) -> List[ConflictRecord]:
    """List every conflict for ``candidate`` with the shared detector."""
    return get_conflict_detector().find_conflicts(candidate, existing_events)
