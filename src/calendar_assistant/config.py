import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    APP_PORT: int = 3000
    CORS_ORIGINS: str = "*"

    # Google OAuth (required at startup)
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = ""

    # LLM Configuration (chat and category endpoints need the key)
    OPENAI_API_KEY: str = ""
    LLM_PROVIDER: str = "openai"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.7

    # Calendar
    CALENDAR_PROVIDER: str = "google"
    CALENDAR_TIMEZONE: str = ""  # empty means the server's local timezone
    COLOR_CACHE_TTL_SECONDS: int = 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()


def validate_required_keys():
    """Validate that the Google OAuth settings are present; warn when the LLM key is missing."""
    required_keys = [
        ("GOOGLE_CLIENT_ID", settings.GOOGLE_CLIENT_ID),
        ("GOOGLE_CLIENT_SECRET", settings.GOOGLE_CLIENT_SECRET),
        ("GOOGLE_REDIRECT_URI", settings.GOOGLE_REDIRECT_URI),
    ]

    missing_keys = []
    for key_name, key_value in required_keys:
        if not key_value or key_value.strip() == "":
            missing_keys.append(key_name)

    if missing_keys:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_keys)}. "
            f"Please check your .env file."
        )

    if settings.OPENAI_API_KEY:
        logger.info("OpenAI API key configured (chat and category endpoints enabled)")
    else:
        logger.warning("OpenAI API key not configured (chat and category endpoints will not work)")
