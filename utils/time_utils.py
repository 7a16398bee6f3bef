"""
utils/time_utils.py

Purpose: Date helpers

- Submission-day default for expenses
- Date <-> BSON datetime conversion
- ISO formatting for reports and replies
"""

from datetime import date, datetime, timezone
from typing import Optional, Union


def today() -> date:
    """
    Returns the current UTC calendar date.
    """
    return datetime.now(timezone.utc).date()


def to_datetime(value: date) -> datetime:
    """
    Converts a calendar date to a midnight datetime (BSON has no date type).
    """
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def to_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """
    Normalizes stored or model-provided values to a calendar date.

    Accepts date, datetime, "YYYY-MM-DD" and full ISO timestamps.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    # "2024-05-01T00:00:00.000Z" and friends
    return date.fromisoformat(text[:10])


def format_date(value: Union[date, datetime, None]) -> str:
    """
    Formats a date as YYYY-MM-DD.
    """
    if not value:
        return "N/A"
    return value.strftime("%Y-%m-%d")
