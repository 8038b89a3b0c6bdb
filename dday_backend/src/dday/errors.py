from __future__ import annotations


class DDayError(ValueError):
    """Base class for errors raised by the D-Day engine."""


# PUBLIC_INTERFACE
class InvalidDate(DDayError):
    """Raised when a target date (or 'today') does not parse as a calendar date."""


# PUBLIC_INTERFACE
class InvalidNotifyOffset(DDayError):
    """Raised when a notify offset is negative or not an integer."""
