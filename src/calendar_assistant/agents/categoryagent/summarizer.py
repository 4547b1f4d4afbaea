"""
Calendar digests for model prompts.

- summarize: frequency summary returned to the caller with initial suggestions
- format_for_model: bounded text digest of a calendar (frequency table + sample)
- format_events_for_categorization: per-event listing for the categorization prompt
"""

from collections import Counter
from datetime import datetime
from typing import List, Sequence

from calendar_assistant.agents.categoryagent.dto import CalendarDataSummary, DateRange
from calendar_assistant.constants import CATEGORY_SETTINGS, SUMMARY_SETTINGS
from calendar_assistant.providers.dto import Appointment
from calendar_assistant.providers.utils.datetime_utils import format_date, format_time


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def count_event_types(appointments: Sequence[Appointment]) -> Counter:
    """Title frequencies; Counter keeps first-seen order for equal counts."""
    return Counter(apt.summary for apt in appointments)


def summarize(appointments: Sequence[Appointment], start: datetime, end: datetime) -> CalendarDataSummary:
    counts = count_event_types(appointments)
    return CalendarDataSummary(
        total_events=len(appointments),
        date_range=DateRange(start=format_date(start), end=format_date(end)),
        top_event_types=[name for name, _ in counts.most_common(SUMMARY_SETTINGS.TOP_EVENT_TYPES)],
    )


def format_single_event(apt: Appointment) -> str:
    details = (
        f'  "{apt.summary}" | {format_date(apt.start_time)} '
        f"{format_time(apt.start_time)}-{format_time(apt.end_time)} ({apt.duration_minutes}min)"
    )
    if apt.location:
        details += f" | Location: {apt.location}"
    if apt.attendee_count:
        details += f" | {_plural(apt.attendee_count, 'attendee')}"
    return details


def format_for_model(appointments: Sequence[Appointment], max_chars: int = SUMMARY_SETTINGS.MAX_CHARS) -> str:
    """
    Digest a calendar into at most ``max_chars`` characters.

    The frequency table always comes first. A strided sample of individual
    events is added only while the table uses less than half the budget.
    """
    formatted = f"Total Events: {len(appointments)}\n\n"

    formatted += "Event Types (sorted by frequency):\n"
    for summary, count in count_event_types(appointments).most_common(SUMMARY_SETTINGS.FREQUENCY_TABLE_SIZE):
        formatted += f'- "{summary}" ({_plural(count, "occurrence")})\n'

    if appointments and len(formatted) < max_chars / 2:
        formatted += "\n\nSample Events (for additional context):\n"
        sample_size = min(SUMMARY_SETTINGS.SAMPLE_SIZE, len(appointments))
        step = max(1, len(appointments) // sample_size)

        for apt in list(appointments[::step])[:sample_size]:
            if len(formatted) >= max_chars:
                break
            formatted += format_single_event(apt) + "\n"

    return formatted[:max_chars]


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def format_events_for_categorization(appointments: Sequence[Appointment]) -> str:
    entries: List[str] = []
    for apt in appointments:
        details = (
            f"Event ID: {apt.id}\n"
            f'Summary: "{apt.summary}"\n'
            f"Date: {format_date(apt.start_time)} at {format_time(apt.start_time)} "
            f"({apt.duration_minutes} min)"
        )
        if apt.description:
            details += f"\nDescription: {_truncate(apt.description, CATEGORY_SETTINGS.DESCRIPTION_MAX_CHARS)}"
        if apt.location:
            details += f"\nLocation: {apt.location}"
        if apt.attendee_count:
            details += f"\nAttendees: {apt.attendee_count}"
        entries.append(details)

    return "\n\n---\n\n".join(entries)
