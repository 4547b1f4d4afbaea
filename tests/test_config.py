import logging

import pytest

from calendar_assistant.config import settings, validate_required_keys
from calendar_assistant.errors import InvalidColorId, MissingTokenError, UpstreamError


@pytest.fixture
def google_keys(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "client-123")
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", "secret")
    monkeypatch.setattr(settings, "GOOGLE_REDIRECT_URI", "http://localhost:3000/api/calendar/callback")


class TestValidateRequiredKeys:

    def test_missing_google_settings_abort(self, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", "  ")
        monkeypatch.setattr(settings, "GOOGLE_REDIRECT_URI", "http://localhost")

        with pytest.raises(ValueError, match="GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET"):
            validate_required_keys()

    def test_missing_openai_key_only_warns(self, monkeypatch, google_keys, caplog):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "")

        with caplog.at_level(logging.WARNING, logger="calendar_assistant.config"):
            validate_required_keys()

        assert "OpenAI API key not configured" in caplog.text


class TestErrorEnvelope:

    def test_without_details(self):
        assert MissingTokenError().to_dict() == {
            "success": False,
            "error": "Access token is required. Include it in Authorization header as: Bearer <token>",
        }
        assert MissingTokenError().status_code == 401

    def test_with_details(self):
        error = UpstreamError("Failed to fetch appointments", details="timeout")
        assert error.to_dict() == {"success": False, "error": "Failed to fetch appointments", "details": "timeout"}
        assert error.status_code == 500

    def test_invalid_color_is_upstream(self):
        error = InvalidColorId("0", ["1", "2"])
        assert isinstance(error, UpstreamError)
        assert error.error == "Invalid color ID: 0. Valid IDs are: 1, 2"
