"""
Access token lifetime handling for a stored OAuth session.
"""

import logging
import time
from typing import Optional

from calendar_assistant.constants import SESSION_SETTINGS
from calendar_assistant.errors import AuthRefreshError, SessionExpiredError
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.dto import TokenSet

logger = logging.getLogger(__name__)


def needs_refresh(tokens: TokenSet, now_ms: Optional[int] = None) -> bool:
    """True when the access token expires within the refresh buffer."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    buffer_ms = SESSION_SETTINGS.REFRESH_BUFFER_SECONDS * 1000
    return tokens.expiry_date - buffer_ms < now_ms


def get_valid_access_token(
    tokens: TokenSet,
    provider: CalendarProvider,
    now_ms: Optional[int] = None,
) -> TokenSet:
    """
    Return a token set whose access token is usable right now.

    Refreshes once when the token is expired or about to expire. A failed
    refresh invalidates the session; callers must send the user back to login.

    Raises:
        SessionExpiredError: the refresh token was rejected
    """
    if not needs_refresh(tokens, now_ms):
        return tokens

    logger.info("Access token expired or about to expire, refreshing")
    try:
        refreshed = provider.refresh(tokens.refresh_token)
    except AuthRefreshError as e:
        logger.warning(f"Token refresh failed: {e.details or e.error}")
        raise SessionExpiredError(details=e.details) from e

    return TokenSet(
        access_token=refreshed.access_token,
        refresh_token=tokens.refresh_token,
        expiry_date=refreshed.expiry_date,
    )
