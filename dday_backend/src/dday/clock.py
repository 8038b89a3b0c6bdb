from __future__ import annotations

from datetime import date

from .settings import get_settings


# PUBLIC_INTERFACE
def get_today() -> date:
    """
    Return "today" as a calendar date.

    Uses DDAY_FIXED_TODAY when configured, otherwise the local system date.
    This is the only place the service reads the clock; the engine functions
    always receive today as an argument. Used as a FastAPI dependency so a
    request evaluates every task against the same date.
    """
    fixed = get_settings().fixed_today
    if fixed is not None:
        return fixed
    return date.today()
