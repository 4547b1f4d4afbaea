from datetime import datetime

import pytz
from langchain_core.messages import SystemMessage

from calendar_assistant.agents.categoryagent.categorization import EventCategorizationEngine, reconcile
from calendar_assistant.agents.categoryagent.dto import (
    Category,
    EventCategorization,
    EventCategorizationOutput,
)

from conftest import FakeProvider, make_appointment, structured_model

CATEGORIES = [
    Category(name="Work Meetings", color_id="1", description="Work-related meetings"),
    Category(name="Health", color_id="10", description="Gym and doctors"),
]

START = pytz.UTC.localize(datetime(2025, 3, 1))
END = pytz.UTC.localize(datetime(2025, 3, 31, 23, 59, 59, 999000))


class TestReconcile:

    def test_every_event_yields_one_result_in_order(self):
        appointments = [make_appointment("a"), make_appointment("b"), make_appointment("c")]
        categorizations = [
            EventCategorization(event_id="c", suggested_category_name="Health", confidence="high"),
            EventCategorization(event_id="a", suggested_category_name="Work Meetings", confidence="medium"),
        ]

        results = reconcile(appointments, CATEGORIES, categorizations)

        assert [r.event.id for r in results] == ["a", "b", "c"]
        assert results[0].suggested_category == CATEGORIES[0]
        assert results[0].confidence == "medium"
        assert results[1].suggested_category is None
        assert results[1].confidence == "low"
        assert results[2].suggested_category == CATEGORIES[1]

    def test_category_name_match_is_case_insensitive(self):
        results = reconcile(
            [make_appointment("a")],
            CATEGORIES,
            [EventCategorization(event_id="a", suggested_category_name="work meetings", confidence="high")],
        )
        assert results[0].suggested_category.name == "Work Meetings"

    def test_unknown_category_name_keeps_model_confidence(self):
        results = reconcile(
            [make_appointment("a")],
            CATEGORIES,
            [EventCategorization(event_id="a", suggested_category_name="Travel", confidence="high")],
        )
        assert results[0].suggested_category is None
        assert results[0].confidence == "high"

    def test_first_categorization_for_an_event_wins(self):
        results = reconcile(
            [make_appointment("a")],
            CATEGORIES,
            [
                EventCategorization(event_id="a", suggested_category_name="Health", confidence="low"),
                EventCategorization(event_id="a", suggested_category_name="Work Meetings", confidence="high"),
            ],
        )
        assert results[0].suggested_category.name == "Health"

    def test_categorizations_for_unknown_events_are_ignored(self):
        results = reconcile(
            [make_appointment("a")],
            CATEGORIES,
            [EventCategorization(event_id="zzz", suggested_category_name="Health", confidence="high")],
        )
        assert len(results) == 1
        assert results[0].suggested_category is None


class TestEventCategorizationEngine:

    async def test_categorizes_fetched_events(self, provider):
        output = EventCategorizationOutput(
            categorizations=[
                EventCategorization(event_id="evt-1", suggested_category_name="Work Meetings", confidence="high"),
                EventCategorization(event_id="evt-2", suggested_category_name="Work Meetings", confidence="medium"),
            ],
            summary="Mostly meetings.",
        )
        model = structured_model(output)

        result = await EventCategorizationEngine(provider, model).categorize(CATEGORIES, START, END, "token")

        assert result.summary == "Mostly meetings."
        assert [e.event.id for e in result.categorized_events] == ["evt-1", "evt-2", "evt-3"]
        assert result.categorized_events[2].confidence == "low"
        assert provider.list_calls == [(START, END, "token")]
        model.with_structured_output.assert_called_once_with(EventCategorizationOutput, method="function_calling")

    async def test_prompt_lists_categories_and_events(self, provider):
        model = structured_model(EventCategorizationOutput(categorizations=[], summary="s"))

        await EventCategorizationEngine(provider, model).categorize(CATEGORIES, START, END, "token")

        (message,) = model.with_structured_output.return_value.ainvoke.call_args.args[0]
        assert isinstance(message, SystemMessage)
        assert '- "Work Meetings": Work-related meetings' in message.content
        assert "Event ID: evt-2" in message.content
        assert "Location: Room 4" in message.content

    async def test_no_events_skips_the_model(self):
        model = structured_model(None)

        result = await EventCategorizationEngine(FakeProvider([]), model).categorize(CATEGORIES, START, END, "token")

        assert result.categorized_events == []
        assert result.summary == "No events found in the specified date range."
        model.with_structured_output.assert_not_called()
