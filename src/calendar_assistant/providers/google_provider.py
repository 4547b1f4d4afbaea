"""
Google Calendar Provider
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import pytz
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from calendar_assistant.config import settings
from calendar_assistant.constants import GOOGLE_CALENDAR_SETTINGS, SESSION_SETTINGS
from calendar_assistant.errors import AuthExchangeError, AuthRefreshError, InvalidColorId
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.color_cache import ColorCache, Palette
from calendar_assistant.providers.dto import (
    Appointment,
    Attendee,
    CalendarProviderName,
    EventColor,
    Organizer,
    RefreshedToken,
    TokenSet,
)
from calendar_assistant.providers.utils.datetime_utils import (
    end_of_day,
    parse_google_calendar_datetime,
    start_of_day,
    to_epoch_ms,
)

logger = logging.getLogger(__name__)


def build_calendar_service(credentials: Credentials):
    return build(
        "calendar",
        GOOGLE_CALENDAR_SETTINGS.API_VERSION,
        credentials=credentials,
        cache_discovery=False,
    )


class GoogleCalendarProvider(CalendarProvider):
    """
    Google Calendar implementation of the CalendarProvider interface.

    Each call builds a Calendar API service from the caller's access token;
    no user credentials are stored on the instance.
    """

    name = CalendarProviderName.GOOGLE.value

    def __init__(
        self,
        color_cache: ColorCache,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        service_factory: Callable[[Credentials], Any] = build_calendar_service,
    ):
        self.color_cache = color_cache
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI
        self.service_factory = service_factory

    # ------------------------------------------------------------------ #
    # OAuth                                                              #
    # ------------------------------------------------------------------ #

    def _client_config(self) -> Dict[str, Any]:
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": GOOGLE_CALENDAR_SETTINGS.AUTH_URI,
                "token_uri": GOOGLE_CALENDAR_SETTINGS.TOKEN_URI,
                "redirect_uris": [self.redirect_uri],
            }
        }

    def _flow(self) -> Flow:
        # The code exchange happens on a different Flow instance than the
        # authorization request, so there is no PKCE verifier to carry over.
        return Flow.from_client_config(
            self._client_config(),
            scopes=GOOGLE_CALENDAR_SETTINGS.SCOPES,
            redirect_uri=self.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def auth_url(self) -> str:
        url, _state = self._flow().authorization_url(
            access_type="offline",
            prompt="consent",  # always issue a refresh token
        )
        return url

    def exchange_code(self, code: str) -> TokenSet:
        flow = self._flow()
        try:
            flow.fetch_token(code=code)
        except (OAuth2Error, GoogleAuthError, ValueError) as e:
            raise AuthExchangeError("Failed to exchange authorization code", details=str(e)) from e

        creds = flow.credentials
        if not creds.token:
            raise AuthExchangeError("No access token received")
        if not creds.refresh_token:
            raise AuthExchangeError("No refresh token received")

        return TokenSet(
            access_token=creds.token,
            refresh_token=creds.refresh_token,
            expiry_date=self._expiry_ms(creds.expiry),
        )

    def refresh(self, refresh_token: str) -> RefreshedToken:
        creds = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=GOOGLE_CALENDAR_SETTINGS.TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=GOOGLE_CALENDAR_SETTINGS.SCOPES,
        )
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            raise AuthRefreshError("Failed to refresh access token", details=str(e)) from e

        if not creds.token:
            raise AuthRefreshError("Failed to refresh access token")

        return RefreshedToken(access_token=creds.token, expiry_date=self._expiry_ms(creds.expiry))

    @staticmethod
    def _expiry_ms(expiry: Optional[datetime]) -> int:
        if expiry is None:
            expiry = datetime.now(pytz.UTC) + timedelta(seconds=SESSION_SETTINGS.DEFAULT_TOKEN_LIFETIME_SECONDS)
        return to_epoch_ms(expiry)

    # ------------------------------------------------------------------ #
    # Events                                                             #
    # ------------------------------------------------------------------ #

    def _service(self, access_token: str):
        return self.service_factory(Credentials(token=access_token))

    def list_appointments(self, start: datetime, end: datetime, access_token: str) -> List[Appointment]:
        if start == end:
            start, end = start_of_day(start), end_of_day(start)
            logger.info(
                f"Same start/end date detected. Expanded to full day: "
                f"{start.isoformat()} to {end.isoformat()}"
            )

        service = self._service(access_token)
        palette = self._palette(service, access_token, strict=False)

        logger.info(f"Fetching appointments between {start.isoformat()} and {end.isoformat()}")
        events = []
        page_token = None
        while True:
            events_result = service.events().list(
                calendarId=GOOGLE_CALENDAR_SETTINGS.PRIMARY_CALENDAR_ID,
                timeMin=start.isoformat(),
                timeMax=end.isoformat(),
                singleEvents=True,
                orderBy="startTime",
                pageToken=page_token,
            ).execute()
            events.extend(events_result.get("items", []))
            page_token = events_result.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Fetched {len(events)} events")
        return [self._convert_to_appointment(event, palette) for event in events]

    def update_color(self, event_id: str, color_id: str, access_token: str) -> Appointment:
        service = self._service(access_token)
        logger.info(f"Updating event {event_id} with color ID {color_id}")

        palette = self._palette(service, access_token, strict=True)
        if color_id not in palette:
            raise InvalidColorId(color_id, sorted(palette, key=int))

        updated = service.events().patch(
            calendarId=GOOGLE_CALENDAR_SETTINGS.PRIMARY_CALENDAR_ID,
            eventId=event_id,
            body={"colorId": color_id},
        ).execute()

        logger.info("Event color updated successfully")
        return self._convert_to_appointment(updated, palette)

    def _palette(self, service, access_token: str, strict: bool) -> Palette:
        """Event color palette for this session; a failed fetch only raises when ``strict``."""
        try:
            return self.color_cache.get_or_fetch(access_token, lambda: self._fetch_colors(service))
        except Exception as e:
            if strict:
                raise
            logger.warning(f"Failed to fetch colors, continuing without color metadata: {e}")
            return {}

    @staticmethod
    def _fetch_colors(service) -> Palette:
        logger.info("Fetching Google Calendar colors...")
        colors = service.colors().get().execute()
        return {
            color_id: EventColor(
                id=color_id,
                background=data.get("background"),
                foreground=data.get("foreground"),
            )
            for color_id, data in (colors.get("event") or {}).items()
        }

    @staticmethod
    def _convert_to_appointment(google_event: Dict[str, Any], palette: Palette) -> Appointment:
        """Convert a Google Calendar event into an Appointment."""
        attendees = None
        if google_event.get("attendees"):
            attendees = [
                Attendee(
                    email=attendee.get("email", ""),
                    display_name=attendee.get("displayName"),
                    response_status=attendee.get("responseStatus"),
                )
                for attendee in google_event["attendees"]
            ]

        organizer = None
        if google_event.get("organizer"):
            organizer = Organizer(
                email=google_event["organizer"].get("email", ""),
                display_name=google_event["organizer"].get("displayName"),
            )

        color = None
        color_id = google_event.get("colorId")
        if color_id and color_id in palette:
            color = palette[color_id]

        return Appointment(
            id=google_event.get("id", ""),
            summary=google_event.get("summary") or "No title",
            description=google_event.get("description"),
            location=google_event.get("location"),
            start_time=parse_google_calendar_datetime(google_event.get("start", {})),
            end_time=parse_google_calendar_datetime(google_event.get("end", {})),
            attendees=attendees,
            organizer=organizer,
            status=google_event.get("status") or "confirmed",
            html_link=google_event.get("htmlLink"),
            provider=CalendarProviderName.GOOGLE,
            color=color,
        )
