"""Utility modules."""

from app.utils.dates import (
    describe_age,
    get_timezone,
    months_between,
    today_in_timezone,
)

__all__ = [
    "describe_age",
    "get_timezone",
    "months_between",
    "today_in_timezone",
]
