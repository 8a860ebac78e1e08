"""
Tests for duplicate and overlap detection
"""
import pytest
from datetime import date, datetime

import pytz

from schedule_resolver.core.calendar import classify, find_conflicts
from schedule_resolver.core.calendar.conflicts import ConflictDetector
from schedule_resolver.core.calendar.models import (
    CalendarEvent,
    ConflictKind,
    EventCandidate,
)


BERLIN = pytz.timezone("Europe/Berlin")


def at(hour, minute=0, day=16):
    return BERLIN.localize(datetime(2025, 11, day, hour, minute))


def existing(title="Standup", start=None, end=None, location=None, event_id="evt_1"):
    return CalendarEvent(
        id=event_id,
        title=title,
        start=start or at(9),
        end=end or at(10),
        location=location,
    )


@pytest.fixture
def detector(test_config):
    return ConflictDetector(config=test_config)


class TestClassify:
    """Test the single most severe conflict"""

    def test_no_events(self, detector):
        candidate = EventCandidate("Standup", at(9), at(10))
        assert detector.classify(candidate, []) is None

    def test_exact_duplicate(self, detector):
        candidate = EventCandidate("Standup", at(9), at(10), "Room 1")
        record = detector.classify(candidate, [existing(location="Room 1")])

        assert record.kind == ConflictKind.DUPLICATE
        assert record.is_duplicate is True
        assert record.existing.id == "evt_1"

    def test_overlap_is_advisory(self, detector):
        candidate = EventCandidate("Lunch", at(9, 30), at(10, 30))
        record = detector.classify(candidate, [existing()])

        assert record.kind == ConflictKind.OVERLAP
        assert record.is_duplicate is False

    def test_duplicate_wins_over_earlier_overlap(self, detector):
        candidate = EventCandidate("Standup", at(9), at(10))
        events = [
            existing(title="Planning", start=at(8, 30), end=at(9, 30), event_id="evt_overlap"),
            existing(event_id="evt_dup"),
        ]

        record = detector.classify(candidate, events)
        assert record.kind == ConflictKind.DUPLICATE
        assert record.existing.id == "evt_dup"

    def test_first_overlap_reported(self, detector):
        candidate = EventCandidate("Workshop", at(9), at(12))
        events = [
            existing(title="A", start=at(10), end=at(11), event_id="evt_a"),
            existing(title="B", start=at(8), end=at(9, 30), event_id="evt_b"),
        ]

        assert detector.classify(candidate, events).existing.id == "evt_a"

    def test_adjacent_events_do_not_overlap(self, detector):
        """Intervals are half-open: back-to-back meetings are fine"""
        candidate = EventCandidate("Next", at(10), at(11))
        assert detector.classify(candidate, [existing()]) is None

    def test_module_level_classify(self):
        candidate = EventCandidate("Standup", at(9), at(10))
        assert classify(candidate, [existing()]).kind == ConflictKind.DUPLICATE


class TestDuplicateRules:
    """Test the exact-match rules"""

    @pytest.mark.parametrize("candidate_location,existing_location", [
        (None, None),
        ("", None),
        (None, ""),
        ("  ", None),
    ])
    def test_absent_locations_match(self, detector, candidate_location, existing_location):
        candidate = EventCandidate("Standup", at(9), at(10), candidate_location)
        record = detector.classify(candidate, [existing(location=existing_location)])
        assert record.kind == ConflictKind.DUPLICATE

    def test_different_location_is_overlap(self, detector):
        candidate = EventCandidate("Standup", at(9), at(10), "Room 2")
        record = detector.classify(candidate, [existing(location="Room 1")])
        assert record.kind == ConflictKind.OVERLAP

    def test_different_title_is_overlap(self, detector):
        candidate = EventCandidate("standup", at(9), at(10))
        assert detector.classify(candidate, [existing()]).kind == ConflictKind.OVERLAP

    def test_different_end_is_overlap(self, detector):
        candidate = EventCandidate("Standup", at(9), at(10, 30))
        assert detector.classify(candidate, [existing()]).kind == ConflictKind.OVERLAP

    def test_same_instant_in_other_zone(self, detector):
        """Start/end compare as instants, not wall-clock strings"""
        candidate = EventCandidate(
            "Standup",
            pytz.UTC.localize(datetime(2025, 11, 16, 8, 0)),
            pytz.UTC.localize(datetime(2025, 11, 16, 9, 0)),
        )
        assert detector.classify(candidate, [existing()]).kind == ConflictKind.DUPLICATE

    def test_naive_candidate_uses_configured_zone(self, detector):
        candidate = EventCandidate("Standup", datetime(2025, 11, 16, 9, 0), datetime(2025, 11, 16, 10, 0))
        assert detector.classify(candidate, [existing()]).kind == ConflictKind.DUPLICATE

    def test_symmetry(self, detector):
        """Swapping candidate and existing gives the same answer"""
        first = EventCandidate("Standup", at(9), at(10), "Room 1")
        second = EventCandidate("Standup", at(9), at(10), "")

        def as_existing(candidate):
            return CalendarEvent("evt", candidate.title, candidate.start, candidate.end, candidate.location)

        forward = detector.classify(first, [as_existing(second)])
        backward = detector.classify(second, [as_existing(first)])
        assert forward.kind == backward.kind == ConflictKind.OVERLAP

        assert detector.classify(first, [as_existing(first)]).is_duplicate
        assert detector.classify(second, [as_existing(second)]).is_duplicate


class TestAllDayEvents:
    """All-day events block the whole day but are never duplicates"""

    def test_all_day_overlaps(self, detector):
        holiday = CalendarEvent("evt_h", "Holiday", date(2025, 11, 16), date(2025, 11, 17))
        candidate = EventCandidate("Holiday", at(9), at(10))

        assert detector.classify(candidate, [holiday]).kind == ConflictKind.OVERLAP

    def test_all_day_without_end(self, detector):
        holiday = CalendarEvent("evt_h", "Holiday", date(2025, 11, 16), None)
        candidate = EventCandidate("Gym", at(18), at(19))

        assert detector.classify(candidate, [holiday]).kind == ConflictKind.OVERLAP

    def test_other_day_is_clear(self, detector):
        holiday = CalendarEvent("evt_h", "Holiday", date(2025, 11, 17), date(2025, 11, 18))
        candidate = EventCandidate("Gym", at(18), at(19))

        assert detector.classify(candidate, [holiday]) is None


class TestFindConflicts:
    """Test the full advisory listing"""

    def test_lists_every_collision(self, detector, sample_api_events):
        candidate = EventCandidate("Block", at(9), at(12))
        records = detector.find_conflicts(candidate, sample_api_events)

        assert [record.existing.id for record in records] == ["evt_standup", "evt_review"]
        assert all(record.kind == ConflictKind.OVERLAP for record in records)

    def test_api_dict_duplicate(self, detector, sample_api_events):
        candidate = EventCandidate("Design review", at(10, 30), at(11, 30), "Room 4")
        record = detector.classify(candidate, sample_api_events)

        assert record.is_duplicate
        assert record.existing.id == "evt_review"

    def test_api_dict_with_event_timezone(self, detector, sample_api_events):
        candidate = EventCandidate("Dinner", at(19), at(21))
        assert detector.classify(candidate, sample_api_events).existing.id == "evt_dinner"

    def test_unparsable_event_skipped(self, detector):
        events = [
            {"id": "broken", "summary": "No times"},
            {"id": "evt_ok", "summary": "Standup",
             "start": {"dateTime": "2025-11-16T09:00:00+01:00"},
             "end": {"dateTime": "2025-11-16T10:00:00+01:00"}},
        ]
        candidate = EventCandidate("Call", at(9, 15), at(9, 45))

        records = detector.find_conflicts(candidate, events)
        assert [record.existing.id for record in records] == ["evt_ok"]

    def test_timed_event_without_end_ignored(self, detector):
        open_ended = CalendarEvent("evt_open", "Open", at(9), None)
        candidate = EventCandidate("Call", at(9), at(10))

        assert detector.find_conflicts(candidate, [open_ended]) == []

    def test_module_level_find_conflicts(self):
        candidate = EventCandidate("Call", at(9, 15), at(9, 45))
        assert len(find_conflicts(candidate, [existing()])) == 1
