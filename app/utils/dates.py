"""Date helpers for age computation and timezone-aware "today"."""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Kolkata"


def get_timezone(name: str | None) -> ZoneInfo:
    """Get a ZoneInfo timezone with safe fallback."""
    if not name:
        return ZoneInfo(settings.APP_TIMEZONE or DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unknown timezone %r, falling back to %s", name, settings.APP_TIMEZONE)
        return ZoneInfo(settings.APP_TIMEZONE or DEFAULT_TIMEZONE)


def today_in_timezone(name: str | None = None) -> date:
    """Calendar date "now" in the given timezone (APP_TIMEZONE by default)."""
    return datetime.now(get_timezone(name)).date()


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end, ignoring day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def describe_age(date_of_birth: date, today: date) -> str:
    """Human age label, e.g. "7 months old", "2 years 3 months old"."""
    total_months = max(months_between(date_of_birth, today), 0)
    if total_months < 12:
        return f"{total_months} months old"
    years, months = divmod(total_months, 12)
    if months:
        return f"{years} years {months} months old"
    return f"{years} years old"
