"""
Error hierarchy for the calendar assistant.

Every error carries the HTTP status it maps to, a short ``error`` message and
optional ``details``. The FastAPI exception handlers in ``main.py`` render them
as ``{"success": false, "error": ..., "details": ...}``.
"""

from typing import Optional


class CalendarAssistantError(Exception):
    """Base error rendered into the uniform error envelope."""

    status_code: int = 500

    def __init__(self, error: str, details: Optional[str] = None):
        super().__init__(error if details is None else f"{error}: {details}")
        self.error = error
        self.details = details

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


# ===================================================================
# 400 - request validation
# ===================================================================

class ValidationError(CalendarAssistantError):
    status_code = 400


class InvalidDateError(ValidationError):
    def __init__(self, value: Optional[str] = None):
        super().__init__("Invalid date format. Use YYYY-MM-DD", details=value)
        self.value = value


# ===================================================================
# 401 - authentication
# ===================================================================

class AuthError(CalendarAssistantError):
    status_code = 401


class MissingTokenError(AuthError):
    def __init__(self):
        super().__init__(
            "Access token is required. Include it in Authorization header as: Bearer <token>"
        )


class AuthExchangeError(AuthError):
    """The provider rejected an authorization code or omitted a token."""


class AuthRefreshError(AuthError):
    """The provider could not mint a new access token."""


class SessionExpiredError(AuthError):
    def __init__(self, details: Optional[str] = None):
        super().__init__("Session expired, please login again", details=details)


# ===================================================================
# 404 - routing
# ===================================================================

class NotFoundError(CalendarAssistantError):
    status_code = 404

    def __init__(self, error: str = "Endpoint not found", details: Optional[str] = None):
        super().__init__(error, details)


# ===================================================================
# 500 - upstream calendar / model failures
# ===================================================================

class UpstreamError(CalendarAssistantError):
    status_code = 500


class CalendarProviderError(UpstreamError):
    """The calendar provider failed or rejected a request."""


class InvalidColorId(CalendarProviderError):
    def __init__(self, color_id: str, valid_ids):
        valid = ", ".join(valid_ids)
        super().__init__(f"Invalid color ID: {color_id}. Valid IDs are: {valid}")
        self.color_id = color_id
        self.valid_ids = list(valid_ids)


class ModelInvocationError(UpstreamError):
    """The hosted language model failed."""


# ===================================================================
# Configuration
# ===================================================================

class UnknownProviderError(CalendarAssistantError):
    def __init__(self, name: str, known):
        super().__init__(
            f"Unknown calendar provider: {name}",
            details=f"Known providers: {', '.join(known)}",
        )
        self.name = name


class ProviderNotImplementedError(CalendarAssistantError):
    status_code = 501

    def __init__(self, name: str):
        super().__init__(f"Calendar provider '{name}' is not implemented yet")
        self.name = name
