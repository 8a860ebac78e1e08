"""
Pytest configuration and fixtures
"""
import pytest
from datetime import date, datetime

import pytz

from schedule_resolver.utils.config import Config, CalendarConfig, ResolverConfig


REFERENCE_DATE = date(2025, 11, 16)  # a Sunday


@pytest.fixture(autouse=True)
def clear_timezone_env(monkeypatch):
    """Keep a developer's TIMEZONE out of the tests"""
    monkeypatch.delenv("TIMEZONE", raising=False)


@pytest.fixture
def reference_date():
    """Sunday 2025-11-16"""
    return REFERENCE_DATE


@pytest.fixture
def fixed_now():
    """10:00 UTC (11:00 Berlin) on the reference date"""
    return datetime(2025, 11, 16, 10, 0, tzinfo=pytz.UTC)


@pytest.fixture
def fixed_clock(fixed_now):
    """Clock callable that always returns ``fixed_now``"""
    return lambda: fixed_now


@pytest.fixture
def test_config():
    """Test configuration"""
    return Config(
        calendar=CalendarConfig(
            timezone="Europe/Berlin",
            default_duration_minutes=60
        ),
        resolver=ResolverConfig(
            min_year=2020,
            max_year=2030
        )
    )


@pytest.fixture
def sample_api_events():
    """Google Calendar events.list items for the reference date"""
    return [
        {
            "id": "evt_standup",
            "summary": "Standup",
            "start": {"dateTime": "2025-11-16T09:00:00+01:00"},
            "end": {"dateTime": "2025-11-16T09:30:00+01:00"},
            "calendarName": "Work",
        },
        {
            "id": "evt_review",
            "summary": "Design review",
            "start": {"dateTime": "2025-11-16T10:30:00+01:00"},
            "end": {"dateTime": "2025-11-16T11:30:00+01:00"},
            "location": "Room 4",
            "calendarName": "Work",
        },
        {
            "id": "evt_dinner",
            "summary": "Dinner",
            "start": {"dateTime": "2025-11-16T19:00:00", "timeZone": "Europe/Berlin"},
            "end": {"dateTime": "2025-11-16T21:00:00", "timeZone": "Europe/Berlin"},
            "calendarName": "Personal",
        },
        {
            "id": "evt_birthday",
            "summary": "Birthday",
            "start": {"date": "2025-11-17"},
            "end": {"date": "2025-11-18"},
            "calendarName": "Personal",
        },
    ]
