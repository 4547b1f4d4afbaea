"""
Chat model factory shared by the category and chat agents.
"""

from typing import Optional

from langchain.chat_models import init_chat_model

from calendar_assistant.config import settings


def create_chat_model(temperature: Optional[float] = None):
    """Create the configured chat model (OpenAI-compatible by default)."""
    return init_chat_model(
        model=settings.LLM_MODEL,
        model_provider=settings.LLM_PROVIDER,
        api_key=settings.OPENAI_API_KEY,
        temperature=settings.LLM_TEMPERATURE if temperature is None else temperature,
    )
