"""
Calendar provider capability interface.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List

from calendar_assistant.providers.dto import Appointment, RefreshedToken, TokenSet
from calendar_assistant.providers.utils.datetime_utils import end_of_day, start_of_day


class CalendarProvider(ABC):
    """Operations every calendar backend must offer."""

    name: str

    @abstractmethod
    def auth_url(self) -> str:
        """Authorization URL the user is redirected to."""

    @abstractmethod
    def exchange_code(self, code: str) -> TokenSet:
        """Exchange an OAuth authorization code for access and refresh tokens."""

    @abstractmethod
    def refresh(self, refresh_token: str) -> RefreshedToken:
        """Mint a new access token from a refresh token."""

    @abstractmethod
    def list_appointments(self, start: datetime, end: datetime, access_token: str) -> List[Appointment]:
        """Appointments between ``start`` and ``end``, ordered by start time."""

    @abstractmethod
    def update_color(self, event_id: str, color_id: str, access_token: str) -> Appointment:
        """Set an event's color and return the updated appointment."""

    def get_appointments(self, day: date, access_token: str) -> List[Appointment]:
        """All appointments on one local calendar day."""
        return self.list_appointments(start_of_day(day), end_of_day(day), access_token)
