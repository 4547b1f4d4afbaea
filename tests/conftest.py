from datetime import datetime, timedelta
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz

from calendar_assistant.config import settings
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.dto import Appointment, Attendee, RefreshedToken, TokenSet


@pytest.fixture(autouse=True)
def utc_calendar(monkeypatch):
    """Pin local time to UTC so day boundaries do not depend on the host."""
    monkeypatch.setattr(settings, "CALENDAR_TIMEZONE", "UTC")


def make_appointment(
    id: str = "evt-1",
    summary: str = "Standup",
    start: Optional[datetime] = None,
    minutes: int = 30,
    **kwargs,
) -> Appointment:
    start = start or pytz.UTC.localize(datetime(2025, 3, 10, 9, 0))
    return Appointment(
        id=id,
        summary=summary,
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        **kwargs,
    )


class FakeProvider(CalendarProvider):
    """In-memory provider that records the ranges it was asked for."""

    name = "fake"

    def __init__(self, appointments: Optional[List[Appointment]] = None):
        self.appointments = list(appointments or [])
        self.list_calls = []
        self.color_updates = []
        self.refresh_error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None

    def auth_url(self) -> str:
        return "https://accounts.example.com/auth?client_id=abc"

    def exchange_code(self, code: str) -> TokenSet:
        return TokenSet(access_token=f"access-{code}", refresh_token="refresh-1", expiry_date=1_700_000_000_000)

    def refresh(self, refresh_token: str) -> RefreshedToken:
        if self.refresh_error:
            raise self.refresh_error
        return RefreshedToken(access_token="access-new", expiry_date=1_800_000_000_000)

    def list_appointments(self, start, end, access_token) -> List[Appointment]:
        self.list_calls.append((start, end, access_token))
        if self.list_error:
            raise self.list_error
        return [apt for apt in self.appointments if start <= apt.start_time <= end]

    def update_color(self, event_id, color_id, access_token) -> Appointment:
        self.color_updates.append((event_id, color_id, access_token))
        return make_appointment(id=event_id)


def structured_model(output):
    """Chat model double whose structured-output runnable returns ``output``."""
    runnable = MagicMock()
    runnable.ainvoke = AsyncMock(return_value=output)
    model = MagicMock()
    model.with_structured_output.return_value = runnable
    return model


@pytest.fixture
def provider():
    return FakeProvider([
        make_appointment("evt-1", "Standup", pytz.UTC.localize(datetime(2025, 3, 10, 9, 0))),
        make_appointment(
            "evt-2",
            "Design Review",
            pytz.UTC.localize(datetime(2025, 3, 11, 14, 0)),
            minutes=60,
            location="Room 4",
            attendees=[Attendee(email="ana@example.com", display_name="Ana")],
        ),
        make_appointment("evt-3", "Standup", pytz.UTC.localize(datetime(2025, 3, 12, 9, 0))),
    ])
