"""
Calendar Chat Agent - LangGraph ReAct Implementation

The model answers schedule questions and decides when to call the
appointments tool. Date arithmetic for the common phrases ("today",
"tomorrow", "this week") is done here and handed to the model in the prompt.
"""

import logging
from datetime import timedelta
from typing import Sequence

from langchain_core.messages import HumanMessage
from langgraph.prebuilt import create_react_agent

from calendar_assistant.agents.categoryagent.dto import ConversationMessage
from calendar_assistant.agents.categoryagent.suggestion import history_to_messages
from calendar_assistant.agents.chatagent.tools import TOOL_NAME, build_calendar_tools
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.utils.datetime_utils import current_week_range, now_local

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "I couldn't process your calendar request. Please try again."


def build_system_prompt(now=None) -> str:
    now = now or now_local()
    today = now.date()
    tomorrow = today + timedelta(days=1)
    week_start, week_end = current_week_range(today)

    return f"""You are a helpful AI assistant with access to the user's Google Calendar.
You can help users with their schedule, meetings, and appointments.

Current date and time: {now:%A, %B} {now.day}, {now.year}, {now.hour % 12 or 12}:{now:%M %p}

When users ask about their schedule:
- ALWAYS use the {TOOL_NAME} tool to fetch their appointments
- Provide clear, conversational summaries
- Include relevant details like times, locations, and attendees
- Be proactive in suggesting useful information

IMPORTANT: For date queries, you MUST use these exact formats when calling the tool:

Single day queries (use "date" parameter):
- "today" = {today.isoformat()}
- "tomorrow" = {tomorrow.isoformat()}

Date range queries (use "start_date" and "end_date" parameters):
- "this week" = start_date: {week_start.isoformat()}, end_date: {week_end.isoformat()}
- For any multi-day period, calculate the start and end dates and use both parameters

Examples:
- "What do I have today?" → Call tool with date="{today.isoformat()}"
- "Show my calendar this week" → Call tool with start_date="{week_start.isoformat()}" and end_date="{week_end.isoformat()}"
"""


def message_text(content) -> str:
    """Flatten message content; some chat models reply with a list of content blocks."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def create_calendar_react_agent(model, provider: CalendarProvider, access_token: str):
    """ReAct agent bound to one user's calendar."""
    return create_react_agent(
        model=model,
        tools=build_calendar_tools(provider, access_token),
        prompt=build_system_prompt(),
    )


class CalendarChatAgent:

    def __init__(self, provider: CalendarProvider, model):
        self.provider = provider
        self.model = model

    async def chat(
        self,
        message: str,
        access_token: str,
        history: Sequence[ConversationMessage] = (),
    ) -> str:
        logger.info(f"Chat request - history length: {len(history)}")

        agent = create_calendar_react_agent(self.model, self.provider, access_token)
        messages = [*history_to_messages(history), HumanMessage(message)]

        result = await agent.ainvoke({"messages": messages})

        if result.get("messages"):
            return message_text(result["messages"][-1].content)
        logger.warning("Chat agent returned no messages")
        return NO_RESPONSE_MESSAGE
