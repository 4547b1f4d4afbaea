"""
Calendar Chat Agent Tools

The chat agent gets one tool, bound to the caller's access token:
- get_calendar_appointments: appointments for a single date or a date range

Date Format Standards:
- Accepts YYYY-MM-DD only, interpreted as a local calendar date
- A range covers start_date 00:00 through end_date 23:59:59.999
- Errors are returned to the model as text so it can explain them
"""

import logging
from typing import List, Optional

from langchain_core.tools import BaseTool, tool
from pydantic import BaseModel, Field

from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.dto import Appointment
from calendar_assistant.providers.utils.datetime_utils import (
    end_of_day,
    parse_date_string,
    start_of_day,
    to_local,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "get_calendar_appointments"


class CalendarToolInput(BaseModel):
    date: Optional[str] = Field(
        default=None,
        description='A specific date in YYYY-MM-DD format (e.g., "2025-12-15"). Use this for single-day queries.',
    )
    start_date: Optional[str] = Field(
        default=None,
        description="Start date for a date range in YYYY-MM-DD format. Must be used with end_date.",
    )
    end_date: Optional[str] = Field(
        default=None,
        description="End date for a date range in YYYY-MM-DD format. Must be used with start_date.",
    )


def format_appointment(appointment: Appointment) -> str:
    start = to_local(appointment.start_time)
    end = to_local(appointment.end_time)
    start_text = f"{start:%a, %b} {start.day}, {start.hour % 12 or 12}:{start:%M %p}"
    end_text = f"{end.hour % 12 or 12}:{end:%M %p}"

    result = f"- {appointment.summary} ({start_text} - {end_text})"

    if appointment.location:
        result += f"\n  Location: {appointment.location}"
    if appointment.description:
        result += f"\n  Description: {appointment.description}"
    if appointment.attendees:
        names = ", ".join(a.display_name or a.email for a in appointment.attendees)
        result += f"\n  Attendees: {names}"
    if appointment.color and appointment.color.background:
        result += f"\n  Color: {appointment.color.background}"

    return result


def format_appointments_response(appointments: List[Appointment]) -> str:
    if not appointments:
        return "No appointments found for the specified date(s)."
    formatted = "\n\n".join(format_appointment(apt) for apt in appointments)
    return f"Found {len(appointments)} appointment(s):\n\n{formatted}"


def fetch_appointments(
    provider: CalendarProvider,
    access_token: str,
    date: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[Appointment]:
    if start_date and end_date:
        start = start_of_day(parse_date_string(start_date))
        end = end_of_day(parse_date_string(end_date))
        return provider.list_appointments(start, end, access_token)

    if date:
        return provider.get_appointments(parse_date_string(date), access_token)

    raise ValueError('Either "date" or both "start_date" and "end_date" must be provided')


def build_calendar_tools(provider: CalendarProvider, access_token: str) -> List[BaseTool]:
    """Tools for one request; the access token is user-specific so they are rebuilt per call."""

    @tool(TOOL_NAME, args_schema=CalendarToolInput)
    def get_calendar_appointments(
        date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> str:
        """
        Get calendar appointments for a specific date or date range.
        Use this tool when the user asks about their schedule, meetings, events, or appointments.
        Examples: "What do I have today?", "Show my meetings for tomorrow", "What's on my calendar next week?"
        Returns a list of appointments with title, time, location, and attendees.
        """
        logger.info(f"Calendar tool invoked: date={date}, start_date={start_date}, end_date={end_date}")
        try:
            appointments = fetch_appointments(provider, access_token, date, start_date, end_date)
        except Exception as e:
            logger.error(f"Calendar tool failed: {e}")
            return f"Error fetching appointments: {e}"

        logger.info(f"Calendar tool fetched {len(appointments)} appointments")
        return format_appointments_response(appointments)

    return [get_calendar_appointments]
