"""
Event Categorization Engine

Assigns every event in a date range to one of the caller's categories. Every
fetched event yields exactly one CategorizedEvent, whatever the model returns.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from fastapi.concurrency import run_in_threadpool
from langchain_core.messages import SystemMessage

from calendar_assistant.agents.categoryagent.dto import (
    CategorizationResult,
    CategorizedEvent,
    Category,
    EventCategorization,
    EventCategorizationOutput,
)
from calendar_assistant.agents.categoryagent.prompts import CATEGORIZATION_PROMPT
from calendar_assistant.agents.categoryagent.summarizer import format_events_for_categorization
from calendar_assistant.constants import CATEGORY_SETTINGS
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.dto import Appointment
from calendar_assistant.providers.utils.datetime_utils import today_local

logger = logging.getLogger(__name__)


def build_categorization_prompt(categories: Sequence[Category], appointments: Sequence[Appointment]) -> str:
    category_list = "\n".join(f'- "{c.name}": {c.description}' for c in categories)
    return CATEGORIZATION_PROMPT.format(
        category_list=category_list,
        today=today_local().isoformat(),
        events=format_events_for_categorization(appointments),
    )


def reconcile(
    appointments: Sequence[Appointment],
    categories: Sequence[Category],
    categorizations: Sequence[EventCategorization],
) -> List[CategorizedEvent]:
    """Map model output back onto the fetched events and the caller's categories."""
    by_event_id: Dict[str, EventCategorization] = {}
    for item in categorizations:
        by_event_id.setdefault(item.event_id, item)

    by_name: Dict[str, Category] = {}
    for category in categories:
        by_name.setdefault(category.name.lower(), category)

    results = []
    for event in appointments:
        categorization = by_event_id.get(event.id)
        if categorization is None:
            results.append(CategorizedEvent(event=event, suggested_category=None, confidence="low"))
            continue

        matched: Optional[Category] = by_name.get(categorization.suggested_category_name.lower())
        results.append(
            CategorizedEvent(event=event, suggested_category=matched, confidence=categorization.confidence)
        )
    return results


class EventCategorizationEngine:

    def __init__(self, provider: CalendarProvider, model):
        self.provider = provider
        self.model = model

    async def categorize(
        self,
        categories: Sequence[Category],
        start: datetime,
        end: datetime,
        access_token: str,
    ) -> CategorizationResult:
        logger.info(f"Categorizing events into {len(categories)} categories from {start} to {end}")

        appointments = await run_in_threadpool(self.provider.list_appointments, start, end, access_token)
        logger.info(f"Fetched {len(appointments)} appointments to categorize")

        if not appointments:
            return CategorizationResult(categorized_events=[], summary=CATEGORY_SETTINGS.NO_EVENTS_SUMMARY)

        system_message = SystemMessage(build_categorization_prompt(categories, appointments))
        structured_model = self.model.with_structured_output(EventCategorizationOutput, method="function_calling")
        output: EventCategorizationOutput = await structured_model.ainvoke([system_message])
        logger.info(f"Model returned {len(output.categorizations)} categorizations")

        return CategorizationResult(
            categorized_events=reconcile(appointments, categories, output.categorizations),
            summary=output.summary,
        )
