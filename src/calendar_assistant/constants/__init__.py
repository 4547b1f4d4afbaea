"""
Calendar Assistant Constants
"""


class APP_SETTINGS:
    """Application metadata"""
    APP_NAME = "Calendar Assistant API"
    VERSION = "1.0.0"
    DESCRIPTION = "Google Calendar proxy with AI category suggestions and chat"
    API_PREFIX = "/api/calendar"


class GOOGLE_CALENDAR_SETTINGS:
    """Google Calendar settings"""
    SCOPES = [
        "https://www.googleapis.com/auth/calendar.readonly",
        "https://www.googleapis.com/auth/calendar.events",
    ]
    API_VERSION = "v3"
    PRIMARY_CALENDAR_ID = "primary"
    AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URI = "https://oauth2.googleapis.com/token"


class SUMMARY_SETTINGS:
    """Calendar digest limits for model prompts"""
    MAX_CHARS = 8000
    TOP_EVENT_TYPES = 10
    FREQUENCY_TABLE_SIZE = 50
    SAMPLE_SIZE = 30
    LOOKBACK_MONTHS = 3


class CATEGORY_SETTINGS:
    """Category suggestion and categorization limits"""
    MIN_CATEGORIES = 4
    MAX_CATEGORIES = 6
    DESCRIPTION_MAX_CHARS = 100
    NO_EVENTS_SUMMARY = "No events found in the specified date range."


class SESSION_SETTINGS:
    """Access token lifetime handling"""
    REFRESH_BUFFER_SECONDS = 5 * 60
    DEFAULT_TOKEN_LIFETIME_SECONDS = 3600
