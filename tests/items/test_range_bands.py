"""
Tests for the ranged weapon table.
"""

import pytest
from core.constants import RangeBand
from items.range_bands import (
    RangeBands,
    get_range_bands,
    is_ranged_weapon,
    max_range_for_weapon,
    range_band_for_distance,
    range_modifier_for_weapon,
)


@pytest.mark.parametrize(
    "distance, expected",
    [
        (0.0, 0),
        (50.0, 0),
        (55.0, -4),
        (80.0, -4),
        (100.0, -6),
        (150.0, -8),
        (150.5, None),
    ],
)
def test_shortbow_penalties(distance, expected):
    assert range_modifier_for_weapon("Shortbow", distance) == expected


def test_unusable_bands_are_out_of_range():
    """Test that a band configured as 0 is never used."""
    assert range_modifier_for_weapon("Net", 12.0) == -4
    assert range_modifier_for_weapon("Net", 15.5) is None
    assert max_range_for_weapon("Net") == 15


def test_melee_weapons_are_not_in_the_table():
    assert not is_ranged_weapon("Longsword")
    assert get_range_bands("Longsword") is None
    assert range_modifier_for_weapon("Longsword", 1.0) is None
    assert max_range_for_weapon("Longsword") is None


def test_weapon_names_are_case_sensitive():
    assert is_ranged_weapon("Longbow")
    assert not is_ranged_weapon("longbow")


def test_max_range_is_largest_band():
    assert max_range_for_weapon("Longbow") == 210
    assert RangeBands(point_blank=30, short=10, medium=0, long=0).max_range == 30


def test_range_band_for_distance():
    assert range_band_for_distance("Sling", 30.0) == RangeBand.POINT_BLANK
    assert range_band_for_distance("Sling", 100.0) == RangeBand.MEDIUM
    assert range_band_for_distance("Sling", 161.0) is None


def test_range_bands_reject_negative_limits():
    with pytest.raises(ValueError):
        RangeBands(point_blank=-1, short=10, medium=20, long=30)
