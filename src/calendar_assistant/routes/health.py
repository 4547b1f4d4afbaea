from datetime import datetime, timezone

from fastapi import APIRouter

from calendar_assistant.constants import APP_SETTINGS
from calendar_assistant.routes.dto import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check():
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=APP_SETTINGS.APP_NAME,
        version=APP_SETTINGS.VERSION,
    )
