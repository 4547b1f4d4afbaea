"""
Calendar routes: OAuth handshake, appointment listing and color updates.

Handlers are plain functions; FastAPI runs them in its threadpool because the
Google client is blocking.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from calendar_assistant.errors import CalendarAssistantError, UpstreamError, ValidationError
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.dto import TokenSet
from calendar_assistant.providers.registry import get_implemented_providers
from calendar_assistant.providers.utils.datetime_utils import end_of_day, parse_date_string, start_of_day
from calendar_assistant.routes.deps import get_access_token, get_provider
from calendar_assistant.routes.dto import (
    AppointmentsResponse,
    AuthUrlResponse,
    CallbackResponse,
    ProvidersResponse,
    RefreshRequest,
    RefreshResponse,
    UpdateColorRequest,
    UpdateColorResponse,
)
from calendar_assistant.session import get_valid_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/auth", response_model=AuthUrlResponse)
def get_auth_url(provider: CalendarProvider = Depends(get_provider)):
    """Authorization URL that starts the OAuth consent flow."""
    try:
        auth_url = provider.auth_url()
    except Exception as e:
        logger.error(f"Error generating auth URL: {e}")
        raise UpstreamError("Failed to generate authorization URL", details=str(e)) from e

    logger.info("Auth URL generated")
    return AuthUrlResponse(auth_url=auth_url, message="Visit this URL to authorize the application")


@router.get("/callback", response_model=CallbackResponse)
def handle_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    provider: CalendarProvider = Depends(get_provider),
):
    """OAuth redirect target; exchanges the authorization code for tokens."""
    if error:
        logger.error(f"OAuth error from provider: {error} ({error_description})")
        raise ValidationError("OAuth authorization failed", details=error_description or error)

    if not code:
        raise ValidationError(
            "Authorization code is required",
            details='The "code" query parameter is missing or invalid. Did you complete the authorization flow?',
        )

    logger.info(f"Exchanging authorization code (length {len(code)}) for tokens")
    try:
        tokens = provider.exchange_code(code)
    except Exception as e:
        logger.error(f"Error exchanging authorization code: {e}")
        details = getattr(e, "details", None) or str(e)
        raise UpstreamError("Failed to exchange authorization code", details=details) from e

    return CallbackResponse(message="Authorization successful", tokens=tokens)


@router.post("/refresh", response_model=RefreshResponse)
def refresh_tokens(request: RefreshRequest, provider: CalendarProvider = Depends(get_provider)):
    """Return a usable token set, refreshing the access token when it is about to expire."""
    tokens = TokenSet(
        access_token=request.access_token,
        refresh_token=request.refresh_token,
        expiry_date=request.expiry_date,
    )
    return RefreshResponse(tokens=get_valid_access_token(tokens, provider))


@router.get("/providers", response_model=ProvidersResponse)
def list_providers():
    return ProvidersResponse(providers=get_implemented_providers())


@router.get("/appointments", response_model=AppointmentsResponse, response_model_exclude_none=True)
def get_appointments(
    date: Optional[str] = None,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    access_token: str = Depends(get_access_token),
    provider: CalendarProvider = Depends(get_provider),
):
    """Appointments for ``date``, or for ``startDate`` through ``endDate`` inclusive."""
    try:
        if date:
            logger.info(f"Fetching appointments for date: {date}")
            appointments = provider.get_appointments(parse_date_string(date), access_token)
        elif start_date and end_date:
            start = start_of_day(parse_date_string(start_date))
            end = end_of_day(parse_date_string(end_date))
            logger.info(f"Fetching appointments between {start.isoformat()} and {end.isoformat()}")
            appointments = provider.list_appointments(start, end, access_token)
        else:
            raise ValidationError(
                'Either "date" or both "startDate" and "endDate" query parameters are required'
            )
    except CalendarAssistantError:
        raise
    except Exception as e:
        logger.error(f"Error fetching appointments: {e}")
        raise UpstreamError("Failed to fetch appointments", details=str(e)) from e

    return AppointmentsResponse(count=len(appointments), appointments=appointments)


@router.patch(
    "/appointments/{event_id}/color",
    response_model=UpdateColorResponse,
    response_model_exclude_none=True,
)
def update_appointment_color(
    event_id: str,
    request: Optional[UpdateColorRequest] = None,
    access_token: str = Depends(get_access_token),
    provider: CalendarProvider = Depends(get_provider),
):
    """Set the color of one event. Body: {"colorId": "1".."11"}."""
    if request is None or not request.color_id:
        raise ValidationError("colorId is required in request body")

    logger.info(f"Updating color of event {event_id} to {request.color_id}")
    try:
        appointment = provider.update_color(event_id, request.color_id, access_token)
    except Exception as e:
        logger.error(f"Error updating appointment color: {e}")
        details = getattr(e, "error", None) or str(e)
        raise UpstreamError("Failed to update appointment color", details=details) from e

    return UpdateColorResponse(message="Appointment color updated successfully", appointment=appointment)
