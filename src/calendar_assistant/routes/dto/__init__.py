"""
Routes Data Transfer Objects (DTOs)

This module contains all Pydantic models used by API routes:
- Request and response models for the auth and appointment endpoints
- Request and response models for chat and category endpoints
- Health check and service index response models

Request fields the handlers check themselves are Optional so that a missing
field produces the endpoint's own 400 message.
"""

from typing import Dict, List, Optional

from calendar_assistant.agents.categoryagent.dto import (
    CalendarDataSummary,
    CategorizedEvent,
    Category,
    ConversationMessage,
    Phase,
)
from calendar_assistant.dto import CamelModel
from calendar_assistant.providers.dto import Appointment, ProviderConfig, TokenSet


# ===================================================================
# AUTH
# ===================================================================

class AuthUrlResponse(CamelModel):
    success: bool = True
    auth_url: str
    message: str


class CallbackResponse(CamelModel):
    success: bool = True
    message: str
    tokens: TokenSet


class RefreshRequest(CamelModel):
    access_token: str
    refresh_token: str
    expiry_date: int


class RefreshResponse(CamelModel):
    success: bool = True
    tokens: TokenSet


class ProvidersResponse(CamelModel):
    success: bool = True
    providers: List[ProviderConfig]


# ===================================================================
# APPOINTMENTS
# ===================================================================

class AppointmentsResponse(CamelModel):
    success: bool = True
    count: int
    appointments: List[Appointment]


class UpdateColorRequest(CamelModel):
    color_id: Optional[str] = None


class UpdateColorResponse(CamelModel):
    success: bool = True
    message: str
    appointment: Appointment


# ===================================================================
# CHAT
# ===================================================================

class ChatRequest(CamelModel):
    message: Optional[str] = None
    conversation_history: List[ConversationMessage] = []


class ChatResponse(CamelModel):
    success: bool = True
    response: str
    message: str


# ===================================================================
# CATEGORIES
# ===================================================================

class SuggestCategoriesRequest(CamelModel):
    message: Optional[str] = None
    conversation_history: List[ConversationMessage] = []


class SuggestCategoriesResponse(CamelModel):
    success: bool = True
    categories: List[Category]
    message: str
    phase: Phase
    calendar_data_summary: Optional[CalendarDataSummary] = None


class CategorizeEventsRequest(CamelModel):
    categories: Optional[List[Category]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CategorizeEventsResponse(CamelModel):
    success: bool = True
    categorized_events: List[CategorizedEvent]
    summary: str


# ===================================================================
# SERVICE
# ===================================================================

class HealthResponse(CamelModel):
    """Health check response model."""
    status: str
    timestamp: str
    service: Optional[str] = None
    version: Optional[str] = None


class IndexResponse(CamelModel):
    message: str
    version: str
    endpoints: Dict[str, str]
