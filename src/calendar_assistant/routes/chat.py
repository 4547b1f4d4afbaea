import logging

from fastapi import APIRouter, Depends

from calendar_assistant.agents.chatagent.calendar_agent import CalendarChatAgent
from calendar_assistant.errors import CalendarAssistantError, UpstreamError, ValidationError
from calendar_assistant.routes.deps import get_access_token, get_chat_agent
from calendar_assistant.routes.dto import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    access_token: str = Depends(get_access_token),
    agent: CalendarChatAgent = Depends(get_chat_agent),
):
    """Answer a question about the user's calendar; the agent fetches appointments as needed."""
    if not request.message:
        raise ValidationError("message is required in request body")

    logger.info(f"Processing chat message ({len(request.message)} chars)")
    try:
        response = await agent.chat(request.message, access_token, request.conversation_history)
        return ChatResponse(response=response, message="Chat response generated successfully")
    except CalendarAssistantError:
        raise
    except Exception as e:
        logger.error(f"Chat error: {e}")
        raise UpstreamError("Failed to process chat message", details=str(e)) from e
