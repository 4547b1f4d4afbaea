import logging

from fastapi import APIRouter, Depends

from calendar_assistant.agents.categoryagent.categorization import EventCategorizationEngine
from calendar_assistant.agents.categoryagent.suggestion import CategorySuggestionEngine
from calendar_assistant.errors import CalendarAssistantError, UpstreamError, ValidationError
from calendar_assistant.providers.utils.datetime_utils import end_of_day, parse_date_string, start_of_day
from calendar_assistant.routes.deps import (
    get_access_token,
    get_categorization_engine,
    get_suggestion_engine,
)
from calendar_assistant.routes.dto import (
    CategorizeEventsRequest,
    CategorizeEventsResponse,
    SuggestCategoriesRequest,
    SuggestCategoriesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/suggest-categories", response_model=SuggestCategoriesResponse, response_model_exclude_none=True)
async def suggest_categories(
    request: SuggestCategoriesRequest,
    access_token: str = Depends(get_access_token),
    engine: CategorySuggestionEngine = Depends(get_suggestion_engine),
):
    """
    Suggest 4-6 categories from the last months of calendar data.

    Without a message or history this is the initial round; any later round
    sends the full conversation back along with the user's feedback.
    """
    logger.info(
        f"Category suggestion request - message present: {bool(request.message)}, "
        f"history length: {len(request.conversation_history)}"
    )
    try:
        suggestion = await engine.suggest(request.message, access_token, request.conversation_history)
    except CalendarAssistantError:
        raise
    except Exception as e:
        logger.error(f"Category suggestion error: {e}")
        raise UpstreamError("Failed to generate category suggestions", details=str(e)) from e

    return SuggestCategoriesResponse(
        categories=suggestion.categories,
        message=suggestion.explanation,
        phase=suggestion.phase,
        calendar_data_summary=suggestion.summary,
    )


@router.post("/categorize-events", response_model=CategorizeEventsResponse, response_model_exclude_none=True)
async def categorize_events(
    request: CategorizeEventsRequest,
    access_token: str = Depends(get_access_token),
    engine: EventCategorizationEngine = Depends(get_categorization_engine),
):
    """Assign each event between startDate and endDate (inclusive) to one of the given categories."""
    if not request.categories:
        raise ValidationError("categories is required and must be a non-empty array")

    if not request.start_date or not request.end_date:
        raise ValidationError("startDate and endDate are required (format: YYYY-MM-DD)")

    start = start_of_day(parse_date_string(request.start_date))
    end = end_of_day(parse_date_string(request.end_date))

    try:
        result = await engine.categorize(request.categories, start, end, access_token)
    except CalendarAssistantError:
        raise
    except Exception as e:
        logger.error(f"Event categorization error: {e}")
        raise UpstreamError("Failed to categorize events", details=str(e)) from e

    return CategorizeEventsResponse(categorized_events=result.categorized_events, summary=result.summary)
