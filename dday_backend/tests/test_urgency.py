from datetime import date, timedelta

import pytest

from src.dday.dates import day_offset
from src.dday.urgency import UrgencyTier, color_tier, dday_label, tier_color

TODAY = date(2025, 3, 10)


@pytest.mark.parametrize(
    "offset, label",
    [(0, "D-Day"), (1, "D-1"), (3, "D-3"), (100, "D-100"), (-1, "D+1"), (-2, "D+2"), (-45, "D+45")],
)
def test_dday_label(offset, label):
    assert dday_label(offset) == label


@pytest.mark.parametrize(
    "offset, tier",
    [
        (-30, UrgencyTier.OVERDUE),
        (-1, UrgencyTier.OVERDUE),
        (0, UrgencyTier.TODAY),
        (1, UrgencyTier.IMMINENT),
        (2, UrgencyTier.IMMINENT),
        (4, UrgencyTier.UPCOMING),
        (90, UrgencyTier.UPCOMING),
    ],
)
def test_color_tier(offset, tier):
    assert color_tier(offset) is tier


def test_imminent_boundary_is_inclusive_at_three():
    assert color_tier(3) is UrgencyTier.IMMINENT
    assert color_tier(4) is UrgencyTier.UPCOMING


def test_target_today():
    offset = day_offset(TODAY, TODAY)
    assert (offset, dday_label(offset), color_tier(offset)) == (0, "D-Day", UrgencyTier.TODAY)


@pytest.mark.parametrize("n", [1, 2, 3, 4, 10])
def test_target_in_future(n):
    offset = day_offset(TODAY + timedelta(days=n), TODAY)
    assert offset == n
    assert dday_label(offset) == f"D-{n}"
    expected = UrgencyTier.IMMINENT if n <= 3 else UrgencyTier.UPCOMING
    assert color_tier(offset) is expected


@pytest.mark.parametrize("n", [1, 2, 3, 4, 10])
def test_target_in_past(n):
    offset = day_offset(TODAY - timedelta(days=n), TODAY)
    assert offset == -n
    assert dday_label(offset) == f"D+{n}"
    assert color_tier(offset) is UrgencyTier.OVERDUE


def test_every_tier_has_a_distinct_color():
    colors = {tier_color(t) for t in UrgencyTier}
    assert len(colors) == len(UrgencyTier)
    assert tier_color(UrgencyTier.TODAY) == "#e74c3c"


def test_tier_serializes_as_plain_string():
    assert UrgencyTier.IMMINENT.value == "imminent"
    assert UrgencyTier("overdue") is UrgencyTier.OVERDUE
