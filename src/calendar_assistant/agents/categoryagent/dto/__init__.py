"""
Category Agent Data Models

This module contains the data models used by the category agent:
- Categories and the conversation turns that carry them
- Calendar digest summary and categorization results
- Structured-output schemas the chat model must satisfy
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from calendar_assistant.constants import CATEGORY_SETTINGS
from calendar_assistant.dto import CamelModel
from calendar_assistant.providers.dto import Appointment

ColorId = Literal["1", "2", "3", "4", "5", "6", "7", "8", "9", "10", "11"]
Confidence = Literal["high", "medium", "low"]


class Phase(str, Enum):
    INITIAL = "initial"
    REFINEMENT = "refinement"


class Category(CamelModel):
    name: str
    color_id: str
    description: str


# ===================================================================
# CONVERSATION TURNS (tagged on role)
# ===================================================================

class UserTurn(CamelModel):
    role: Literal["user"] = "user"
    content: str


class AssistantTurn(CamelModel):
    role: Literal["assistant"] = "assistant"
    content: str
    categories: Optional[List[Category]] = None


class SystemTurn(CamelModel):
    role: Literal["system"] = "system"
    content: str


ConversationMessage = Annotated[
    Union[UserTurn, AssistantTurn, SystemTurn],
    Field(discriminator="role"),
]


# ===================================================================
# RESULTS
# ===================================================================

class DateRange(CamelModel):
    start: str
    end: str


class CalendarDataSummary(CamelModel):
    total_events: int
    date_range: DateRange
    top_event_types: List[str] = []


class CategorySuggestion(CamelModel):
    categories: List[Category]
    explanation: str
    phase: Phase
    summary: Optional[CalendarDataSummary] = None


class CategorizedEvent(CamelModel):
    event: Appointment
    suggested_category: Optional[Category] = None
    confidence: Confidence


class CategorizationResult(CamelModel):
    categorized_events: List[CategorizedEvent]
    summary: str


# ===================================================================
# STRUCTURED OUTPUT SCHEMAS
# ===================================================================

class SuggestedCategory(BaseModel):
    name: str = Field(description="A clear, concise category name (2-4 words max)")
    color_id: ColorId = Field(description="Google Calendar color ID")
    description: str = Field(
        description="A brief explanation of what events belong in this category (1-2 sentences)"
    )


class CategorySuggestionOutput(BaseModel):
    """Suggested calendar categories and how they were chosen."""
    categories: List[SuggestedCategory] = Field(
        min_length=CATEGORY_SETTINGS.MIN_CATEGORIES,
        max_length=CATEGORY_SETTINGS.MAX_CATEGORIES,
        description="Array of 4-6 suggested categories",
    )
    explanation: str = Field(description="Brief explanation of the categories and how they were chosen")

    @model_validator(mode="after")
    def check_unique(self):
        names = [c.name.strip().lower() for c in self.categories]
        if len(set(names)) != len(names):
            raise ValueError("category names must be unique")
        color_ids = [c.color_id for c in self.categories]
        if len(set(color_ids)) != len(color_ids):
            raise ValueError("category color ids must be unique")
        return self


class EventCategorization(BaseModel):
    event_id: str = Field(description="The ID of the event")
    suggested_category_name: str = Field(description="The name of the category this event belongs to")
    confidence: Confidence = Field(description="Confidence level of the categorization")


class EventCategorizationOutput(BaseModel):
    """Category assignments for a batch of calendar events."""
    categorizations: List[EventCategorization] = Field(description="Array of event categorizations")
    summary: str = Field(description="Brief summary of the categorization results")
