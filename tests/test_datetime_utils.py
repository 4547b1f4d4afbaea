from datetime import date, datetime

import pytest
import pytz

from calendar_assistant.config import settings
from calendar_assistant.errors import InvalidDateError
from calendar_assistant.providers.utils.datetime_utils import (
    current_week_range,
    end_of_day,
    format_date,
    format_time,
    lookback_range,
    parse_date_string,
    parse_google_calendar_datetime,
    start_of_day,
    to_epoch_ms,
)


class TestParseDateString:

    def test_valid_date(self):
        assert parse_date_string("2025-12-15") == date(2025, 12, 15)

    def test_leap_day(self):
        assert parse_date_string("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2025-02-30", "2023-02-29", "2025-13-01", "2025-00-10"])
    def test_nonexistent_dates_rejected(self, value):
        with pytest.raises(InvalidDateError):
            parse_date_string(value)

    @pytest.mark.parametrize("value", ["2025-1-5", "15-12-2025", "2025/12/15", "2025-12-15T00:00:00", "", None])
    def test_wrong_shape_rejected(self, value):
        with pytest.raises(InvalidDateError) as exc_info:
            parse_date_string(value)
        assert exc_info.value.error == "Invalid date format. Use YYYY-MM-DD"
        assert exc_info.value.status_code == 400


class TestDayBoundaries:

    def test_start_and_end_of_day_utc(self):
        day = date(2025, 3, 10)
        assert start_of_day(day) == pytz.UTC.localize(datetime(2025, 3, 10, 0, 0))
        assert end_of_day(day) == pytz.UTC.localize(datetime(2025, 3, 10, 23, 59, 59, 999000))

    def test_boundaries_follow_configured_timezone(self, monkeypatch):
        monkeypatch.setattr(settings, "CALENDAR_TIMEZONE", "America/New_York")
        start = start_of_day(date(2025, 7, 4))
        assert start.utcoffset().total_seconds() == -4 * 3600
        assert start.hour == 0

    def test_datetime_input_uses_its_local_date(self):
        instant = pytz.UTC.localize(datetime(2025, 3, 10, 15, 30))
        assert start_of_day(instant) == pytz.UTC.localize(datetime(2025, 3, 10))
        assert end_of_day(instant).date() == date(2025, 3, 10)

    def test_lookback_range_spans_calendar_months(self):
        start, end = lookback_range(3, today=date(2025, 5, 31))
        assert start == pytz.UTC.localize(datetime(2025, 2, 28))
        assert end == pytz.UTC.localize(datetime(2025, 5, 31, 23, 59, 59, 999000))

    @pytest.mark.parametrize(
        "today,expected_start",
        [
            (date(2025, 3, 9), date(2025, 3, 9)),    # Sunday
            (date(2025, 3, 12), date(2025, 3, 9)),   # Wednesday
            (date(2025, 3, 15), date(2025, 3, 9)),   # Saturday
        ],
    )
    def test_current_week_is_sunday_to_saturday(self, today, expected_start):
        start, end = current_week_range(today)
        assert start == expected_start
        assert (end - start).days == 6
        assert end.weekday() == 5


class TestGoogleDatetime:

    def test_datetime_keeps_offset(self):
        parsed = parse_google_calendar_datetime({"dateTime": "2025-03-10T09:00:00-05:00"})
        assert parsed == pytz.UTC.localize(datetime(2025, 3, 10, 14, 0))

    def test_z_suffix(self):
        parsed = parse_google_calendar_datetime({"dateTime": "2025-03-10T09:00:00Z"})
        assert parsed == pytz.UTC.localize(datetime(2025, 3, 10, 9, 0))

    def test_all_day_event_is_local_midnight(self):
        parsed = parse_google_calendar_datetime({"date": "2025-03-10"})
        assert parsed == pytz.UTC.localize(datetime(2025, 3, 10))

    def test_missing_boundary_raises(self):
        with pytest.raises(ValueError):
            parse_google_calendar_datetime({})


class TestFormatting:

    def test_format_date_and_time(self):
        instant = pytz.UTC.localize(datetime(2025, 3, 10, 14, 5))
        assert format_date(instant) == "2025-03-10"
        assert format_time(instant) == "02:05 PM"

    def test_format_converts_to_local_zone(self, monkeypatch):
        monkeypatch.setattr(settings, "CALENDAR_TIMEZONE", "Asia/Tokyo")
        instant = pytz.UTC.localize(datetime(2025, 3, 10, 20, 0))
        assert format_date(instant) == "2025-03-11"
        assert format_time(instant) == "05:00 AM"

    def test_epoch_ms(self):
        assert to_epoch_ms(pytz.UTC.localize(datetime(2023, 11, 14, 22, 13, 20))) == 1_700_000_000_000

    def test_epoch_ms_naive_is_utc(self):
        assert to_epoch_ms(datetime(2023, 11, 14, 22, 13, 20)) == 1_700_000_000_000
