"""
Calendar Datetime Utilities

This module provides date parsing and day-boundary helpers:
- parse_date_string: Parse a strict YYYY-MM-DD string into a local calendar date
- start_of_day / end_of_day: Local day boundaries as timezone-aware datetimes
- to_local: Normalize a provider instant to the local timezone
- parse_google_calendar_datetime: Parse Google Calendar start/end payloads

"Local" is the server's timezone unless CALENDAR_TIMEZONE names a pytz zone.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz
from dateutil.relativedelta import relativedelta

from calendar_assistant.config import settings
from calendar_assistant.errors import InvalidDateError

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def get_local_timezone():
    """Configured pytz zone, or None to use the system local timezone."""
    if settings.CALENDAR_TIMEZONE:
        return pytz.timezone(settings.CALENDAR_TIMEZONE)
    return None


def localize(naive: datetime) -> datetime:
    """Attach the local timezone to a naive wall-clock datetime."""
    tz = get_local_timezone()
    if tz is not None:
        return tz.localize(naive)
    return naive.astimezone()


def to_local(dt: datetime) -> datetime:
    """Convert an instant to local time; naive values are taken as local already."""
    if dt.tzinfo is None:
        return localize(dt)
    tz = get_local_timezone()
    if tz is not None:
        return dt.astimezone(tz)
    return dt.astimezone()


def now_local() -> datetime:
    return to_local(datetime.now(pytz.UTC))


def today_local() -> date:
    return now_local().date()


def parse_date_string(value: str) -> date:
    """
    Parse a YYYY-MM-DD string as a local calendar date (not UTC).

    Raises:
        InvalidDateError: wrong shape, or a date that does not exist (e.g. 2025-02-30)
    """
    match = _DATE_RE.match(value or "")
    if not match:
        raise InvalidDateError(value)

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDateError(value) from None


def start_of_day(day) -> datetime:
    """00:00:00.000 local time of the given date (or of a datetime's local date)."""
    if isinstance(day, datetime):
        day = to_local(day).date()
    return localize(datetime.combine(day, time.min))


def end_of_day(day) -> datetime:
    """23:59:59.999 local time of the given date (or of a datetime's local date)."""
    if isinstance(day, datetime):
        day = to_local(day).date()
    return localize(datetime.combine(day, time(23, 59, 59, 999000)))


def lookback_range(months: int, today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """[start of (today - months), end of today] in local time."""
    today = today or today_local()
    return start_of_day(today - relativedelta(months=months)), end_of_day(today)


def current_week_range(today: Optional[date] = None) -> Tuple[date, date]:
    """Sunday..Saturday week containing ``today``."""
    today = today or today_local()
    # isoweekday: Monday=1 .. Sunday=7
    start = today - timedelta(days=today.isoweekday() % 7)
    return start, start + timedelta(days=6)


def parse_google_calendar_datetime(date_dict: dict) -> datetime:
    """
    Parse a Google Calendar start/end dict.

    Timed events keep their explicit offset; all-day events become local midnight.
    """
    if date_dict.get("dateTime"):
        return datetime.fromisoformat(date_dict["dateTime"].replace("Z", "+00:00"))
    if date_dict.get("date"):
        return start_of_day(parse_date_string(date_dict["date"]))
    raise ValueError(f"Event boundary has neither dateTime nor date: {date_dict}")


def format_date(dt: datetime) -> str:
    return to_local(dt).strftime("%Y-%m-%d")


def format_time(dt: datetime) -> str:
    """Two-digit 12-hour clock, e.g. 09:05 AM."""
    return to_local(dt).strftime("%I:%M %p")


def to_epoch_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return int(dt.timestamp() * 1000)
