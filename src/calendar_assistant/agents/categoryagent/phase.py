from typing import Optional, Sequence

from calendar_assistant.agents.categoryagent.dto import ConversationMessage, Phase


def resolve_phase(message: Optional[str], history: Sequence[ConversationMessage]) -> Phase:
    """Initial only when there is neither a user message nor any prior turn."""
    if not message and not history:
        return Phase.INITIAL
    return Phase.REFINEMENT
