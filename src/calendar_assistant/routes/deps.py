"""
FastAPI dependencies shared by the route modules.

The calendar provider is created once in ``create_app`` and kept on
``app.state``; the chat model is created on first use so the service can
start without an LLM key.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from calendar_assistant.agents.categoryagent.categorization import EventCategorizationEngine
from calendar_assistant.agents.categoryagent.suggestion import CategorySuggestionEngine
from calendar_assistant.agents.chatagent.calendar_agent import CalendarChatAgent
from calendar_assistant.agents.model import create_chat_model
from calendar_assistant.errors import MissingTokenError, ModelInvocationError
from calendar_assistant.providers.base import CalendarProvider

logger = logging.getLogger(__name__)


def get_access_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Bearer token from the Authorization header; it is verified by the provider, not here."""
    if not authorization:
        raise MissingTokenError()
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise MissingTokenError()
    return token


def get_provider(request: Request) -> CalendarProvider:
    return request.app.state.provider


def get_chat_model(request: Request):
    if request.app.state.chat_model is None:
        try:
            request.app.state.chat_model = create_chat_model()
        except Exception as e:
            logger.error(f"Failed to initialize chat model: {e}")
            raise ModelInvocationError("Language model is not configured", details=str(e)) from e
    return request.app.state.chat_model


def get_suggestion_engine(
    provider: CalendarProvider = Depends(get_provider),
    model=Depends(get_chat_model),
) -> CategorySuggestionEngine:
    return CategorySuggestionEngine(provider, model)


def get_categorization_engine(
    provider: CalendarProvider = Depends(get_provider),
    model=Depends(get_chat_model),
) -> EventCategorizationEngine:
    return EventCategorizationEngine(provider, model)


def get_chat_agent(
    provider: CalendarProvider = Depends(get_provider),
    model=Depends(get_chat_model),
) -> CalendarChatAgent:
    return CalendarChatAgent(provider, model)
