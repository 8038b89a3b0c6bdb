from __future__ import annotations

from datetime import date, datetime
from typing import Union

from .errors import InvalidDate

DateInput = Union[date, datetime, str]


# PUBLIC_INTERFACE
def to_calendar_date(value: DateInput) -> date:
    """
    Normalize a date-like value to a plain calendar date.

    - datetime: the time of day and tzinfo are dropped as-is (no timezone shifting).
    - date: returned unchanged.
    - str: 'YYYY-MM-DD', or an ISO8601 datetime whose date part is kept.

    Raises:
        InvalidDate: if the value cannot be read as a calendar date.
    """
    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        s = value.strip()
        try:
            return date.fromisoformat(s)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(s).date()
        except ValueError as e:
            raise InvalidDate(
                f"Invalid date {value!r}. Use an ISO8601 date such as '2025-01-31'."
            ) from e

    raise InvalidDate(f"Invalid type for date: {type(value).__name__}")


# PUBLIC_INTERFACE
def day_offset(target_date: DateInput, today: DateInput) -> int:
    """
    Signed number of calendar days from today to target_date.

    Positive means the target is in the future, zero means it is today and a
    negative value means it has passed. Both sides are reduced to calendar
    dates before subtracting, so daylight-saving transitions and time-of-day
    components never shift the result.
    """
    return (to_calendar_date(target_date) - to_calendar_date(today)).days
