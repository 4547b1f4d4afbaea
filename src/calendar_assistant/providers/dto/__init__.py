"""
Calendar Provider Data Models

Canonical appointment shape shared by every calendar provider, plus the
OAuth token sets returned by the auth operations.
"""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import ConfigDict

from calendar_assistant.dto import CamelModel


class CalendarProviderName(str, Enum):
    GOOGLE = "google"
    OUTLOOK = "outlook"
    APPLE = "apple"
    OTHER = "other"


ResponseStatus = Literal["accepted", "declined", "tentative", "needsAction"]
EventStatus = Literal["confirmed", "tentative", "cancelled"]


class _FrozenModel(CamelModel):
    model_config = ConfigDict(frozen=True)


class Attendee(_FrozenModel):
    email: str
    display_name: Optional[str] = None
    response_status: Optional[ResponseStatus] = None


class Organizer(_FrozenModel):
    email: str
    display_name: Optional[str] = None


class EventColor(_FrozenModel):
    id: Optional[str] = None
    background: Optional[str] = None
    foreground: Optional[str] = None


class Appointment(_FrozenModel):
    """A calendar event normalized from the provider's wire format."""
    id: str
    summary: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    attendees: Optional[List[Attendee]] = None
    organizer: Optional[Organizer] = None
    status: EventStatus = "confirmed"
    html_link: Optional[str] = None
    provider: CalendarProviderName = CalendarProviderName.GOOGLE
    color: Optional[EventColor] = None

    @property
    def duration_minutes(self) -> int:
        return round((self.end_time - self.start_time).total_seconds() / 60)

    @property
    def attendee_count(self) -> int:
        return len(self.attendees or [])


class TokenSet(CamelModel):
    """Tokens issued by the OAuth code exchange. ``expiry_date`` is epoch milliseconds."""
    access_token: str
    refresh_token: str
    expiry_date: int


class RefreshedToken(CamelModel):
    access_token: str
    expiry_date: int


class ProviderConfig(CamelModel):
    name: str
    display_name: str
    auth_url: Optional[str] = None
    scopes: List[str] = []
    is_implemented: bool
