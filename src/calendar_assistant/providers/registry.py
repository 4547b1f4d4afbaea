"""
Calendar provider registry.

Maps provider names to their configuration and, for implemented providers,
to the CalendarProvider class that serves them. Unknown names are rejected
rather than silently falling back to Google.
"""

import logging
from typing import Dict, List, Type

from calendar_assistant.constants import GOOGLE_CALENDAR_SETTINGS
from calendar_assistant.errors import ProviderNotImplementedError, UnknownProviderError
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.color_cache import ColorCache
from calendar_assistant.providers.dto import ProviderConfig
from calendar_assistant.providers.google_provider import GoogleCalendarProvider

logger = logging.getLogger(__name__)


PROVIDER_CONFIGS: Dict[str, ProviderConfig] = {
    "google": ProviderConfig(
        name="google",
        display_name="Google Calendar",
        scopes=GOOGLE_CALENDAR_SETTINGS.SCOPES,
        is_implemented=True,
    ),
    "outlook": ProviderConfig(
        name="outlook",
        display_name="Microsoft Outlook",
        auth_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
        scopes=["https://graph.microsoft.com/Calendars.Read"],
        is_implemented=False,
    ),
    "apple": ProviderConfig(
        name="apple",
        display_name="Apple Calendar (iCloud)",
        scopes=[],
        is_implemented=False,
    ),
}

PROVIDER_CLASSES: Dict[str, Type[CalendarProvider]] = {
    "google": GoogleCalendarProvider,
}


def get_provider_config(name: str) -> ProviderConfig:
    config = PROVIDER_CONFIGS.get((name or "").lower())
    if config is None:
        raise UnknownProviderError(name, PROVIDER_CONFIGS.keys())
    return config


def get_implemented_providers() -> List[ProviderConfig]:
    return [config for config in PROVIDER_CONFIGS.values() if config.is_implemented]


def create_provider(name: str, color_cache: ColorCache, **kwargs) -> CalendarProvider:
    """Instantiate the provider registered under ``name``."""
    config = get_provider_config(name)
    provider_cls = PROVIDER_CLASSES.get(config.name)
    if provider_cls is None:
        raise ProviderNotImplementedError(config.name)

    logger.info(f"Using calendar provider: {config.display_name}")
    return provider_cls(color_cache=color_cache, **kwargs)
