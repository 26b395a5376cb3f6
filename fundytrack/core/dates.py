# fundytrack/core/dates.py
"""
Reference-instant helpers.

Only the API layer reads the clock; everything below it receives the
reference date explicitly.
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fundytrack.core.config import settings


def local_today(tz_name: str | None = None) -> date:
    """Current calendar day in the configured timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.TIMEZONE)).date()


def month_key(day: date) -> str:
    """'YYYY-MM' for a calendar day."""
    return f"{day.year:04d}-{day.month:02d}"


def current_month(tz_name: str | None = None) -> str:
    return month_key(local_today(tz_name))
