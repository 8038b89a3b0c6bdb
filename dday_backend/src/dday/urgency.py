from __future__ import annotations

from enum import Enum

IMMINENT_MAX_DAYS = 3


# PUBLIC_INTERFACE
class UrgencyTier(str, Enum):
    """Severity tier of a task derived from its day offset."""

    OVERDUE = "overdue"
    TODAY = "today"
    IMMINENT = "imminent"
    UPCOMING = "upcoming"


_TIER_COLORS = {
    UrgencyTier.OVERDUE: "#999999",
    UrgencyTier.TODAY: "#e74c3c",
    UrgencyTier.IMMINENT: "#e67e22",
    UrgencyTier.UPCOMING: "#2ecc71",
}


# PUBLIC_INTERFACE
def dday_label(offset: int) -> str:
    """Render a day offset as 'D-Day', 'D-3' (3 days left) or 'D+2' (2 days past)."""
    if offset == 0:
        return "D-Day"
    if offset > 0:
        return f"D-{offset}"
    return f"D+{abs(offset)}"


# PUBLIC_INTERFACE
def color_tier(offset: int) -> UrgencyTier:
    """
    Map a day offset to its urgency tier.

    offset < 0 -> OVERDUE, 0 -> TODAY, 1..3 -> IMMINENT, > 3 -> UPCOMING.
    """
    if offset < 0:
        return UrgencyTier.OVERDUE
    if offset == 0:
        return UrgencyTier.TODAY
    if offset <= IMMINENT_MAX_DAYS:
        return UrgencyTier.IMMINENT
    return UrgencyTier.UPCOMING


# PUBLIC_INTERFACE
def tier_color(tier: UrgencyTier) -> str:
    """Hex color used to badge a tier."""
    return _TIER_COLORS[tier]
