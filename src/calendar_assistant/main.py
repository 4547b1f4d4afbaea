import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from calendar_assistant.config import settings
from calendar_assistant.constants import APP_SETTINGS
from calendar_assistant.errors import CalendarAssistantError, NotFoundError
from calendar_assistant.providers.base import CalendarProvider
from calendar_assistant.providers.color_cache import ColorCache
from calendar_assistant.providers.registry import create_provider
from calendar_assistant.routes import calendar, categories, chat, health
from calendar_assistant.routes.dto import IndexResponse

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


def _endpoint_index() -> dict:
    prefix = APP_SETTINGS.API_PREFIX
    return {
        "auth": f"GET {prefix}/auth - Get authorization URL",
        "callback": f"GET {prefix}/callback?code=... - OAuth callback",
        "refresh": f"POST {prefix}/refresh - Refresh an expiring access token",
        "providers": f"GET {prefix}/providers - List available calendar providers",
        "appointments": f"GET {prefix}/appointments?date=YYYY-MM-DD - Get appointments",
        "appointmentsRange": (
            f"GET {prefix}/appointments?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD - Get appointments in range"
        ),
        "updateColor": (
            f'PATCH {prefix}/appointments/:eventId/color - Update appointment color (body: {{colorId: "1-11"}})'
        ),
        "chat": f"POST {prefix}/chat - Chat with AI assistant about your calendar (body: {{message: string}})",
        "suggestCategories": (
            f"POST {prefix}/suggest-categories - AI-powered category suggestions "
            f"(body: {{message?: string, conversationHistory?: array}})"
        ),
        "categorizeEvents": (
            f"POST {prefix}/categorize-events - Categorize events using AI "
            f"(body: {{categories: Category[], startDate: string, endDate: string}})"
        ),
        "health": "GET /health - Service health",
    }


def create_app(provider: Optional[CalendarProvider] = None) -> FastAPI:
    app = FastAPI(
        title=APP_SETTINGS.APP_NAME,
        version=APP_SETTINGS.VERSION,
        description=APP_SETTINGS.DESCRIPTION
    )

    app.state.provider = provider or create_provider(
        settings.CALENDAR_PROVIDER,
        ColorCache(settings.COLOR_CACHE_TTL_SECONDS),
    )
    app.state.chat_model = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """Validate configuration on startup"""
        from calendar_assistant.config import validate_required_keys
        try:
            validate_required_keys()
            logger.info("Configuration validation passed")
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down gracefully...")

    @app.exception_handler(CalendarAssistantError)
    async def calendar_assistant_error_handler(request: Request, exc: CalendarAssistantError):
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.warning(f"{request.method} {request.url.path} -> 400: {details}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request", "details": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content=NotFoundError().to_dict())
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
        )

    @app.get("/", response_model=IndexResponse)
    async def root():
        return IndexResponse(
            message=APP_SETTINGS.APP_NAME,
            version=APP_SETTINGS.VERSION,
            endpoints=_endpoint_index(),
        )

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(calendar.router, prefix=APP_SETTINGS.API_PREFIX, tags=["Calendar"])
    app.include_router(categories.router, prefix=APP_SETTINGS.API_PREFIX, tags=["Categories"])
    app.include_router(chat.router, prefix=APP_SETTINGS.API_PREFIX, tags=["Chat"])

    return app


app = create_app()


def main():
    import uvicorn

    uvicorn.run(
        "calendar_assistant.main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development"
    )


if __name__ == "__main__":
    main()
