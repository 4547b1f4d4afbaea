"""
Category Suggestion Engine

Suggests 4-6 calendar categories from the user's recent events, then refines
them from user feedback. The caller owns the conversation transcript and sends
it back on every refinement round.
"""

import logging
from typing import List, Optional, Sequence

from fastapi.concurrency import run_in_threadpool
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from calendar_assistant.agents.categoryagent.dto import (
    AssistantTurn,
    CalendarDataSummary,
    Category,
    CategorySuggestion,
    CategorySuggestionOutput,
    ConversationMessage,
    Phase,
    UserTurn,
)
from calendar_assistant.agents.categoryagent.phase import resolve_phase
from calendar_assistant.agents.categoryagent.prompts import (
    INITIAL_SUGGESTION_PROMPT,
    PREVIOUS_CATEGORIES_TEMPLATE,
    REFINEMENT_PROMPT,
)
from calendar_assistant.agents.categoryagent.summarizer import format_for_model, summarize
from calendar_assistant.constants import SUMMARY_SETTINGS
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.utils.datetime_utils import lookback_range, today_local

logger = logging.getLogger(__name__)


def format_category_list(categories: Sequence[Category]) -> str:
    return "\n".join(f"- {c.name} (Color {c.color_id}): {c.description}" for c in categories)


def history_to_messages(history: Sequence[ConversationMessage]) -> List[BaseMessage]:
    """Replay caller-held turns as LangChain messages; assistant turns inline their categories."""
    messages: List[BaseMessage] = []
    for turn in history:
        if isinstance(turn, UserTurn):
            messages.append(HumanMessage(turn.content))
        elif isinstance(turn, AssistantTurn):
            content = turn.content
            if turn.categories:
                content = PREVIOUS_CATEGORIES_TEMPLATE.format(
                    category_list=format_category_list(turn.categories),
                    content=turn.content,
                )
            messages.append(AIMessage(content))
        else:
            messages.append(SystemMessage(turn.content))
    return messages


class CategorySuggestionEngine:

    def __init__(self, provider: CalendarProvider, model):
        self.provider = provider
        self.model = model

    async def suggest(
        self,
        message: Optional[str],
        access_token: str,
        history: Sequence[ConversationMessage] = (),
    ) -> CategorySuggestion:
        phase = resolve_phase(message, history)
        logger.info(f"Category suggestion - phase: {phase.value}, history length: {len(history)}")

        summary: Optional[CalendarDataSummary] = None
        today = today_local().isoformat()

        if phase is Phase.INITIAL:
            start, end = lookback_range(SUMMARY_SETTINGS.LOOKBACK_MONTHS)
            appointments = await run_in_threadpool(self.provider.list_appointments, start, end, access_token)
            logger.info(f"Fetched {len(appointments)} appointments for category suggestion")

            summary = summarize(appointments, start, end)
            system_message = SystemMessage(
                INITIAL_SUGGESTION_PROMPT.format(today=today, calendar_data=format_for_model(appointments))
            )
        else:
            system_message = SystemMessage(REFINEMENT_PROMPT.format(today=today))

        messages = [system_message, *history_to_messages(history)]
        if message:
            messages.append(HumanMessage(message))

        logger.info(f"Invoking model with {len(messages)} messages")
        structured_model = self.model.with_structured_output(CategorySuggestionOutput, method="function_calling")
        output: CategorySuggestionOutput = await structured_model.ainvoke(messages)

        return CategorySuggestion(
            categories=[
                Category(name=c.name, color_id=c.color_id, description=c.description)
                for c in output.categories
            ],
            explanation=output.explanation,
            phase=phase,
            summary=summary,
        )
