"""
Tests for the duel enumerations.
"""

import pytest
from core.constants import RangeBand, Side


def test_side_opponent():
    assert Side.FIRST.opponent is Side.SECOND
    assert Side.SECOND.opponent is Side.FIRST


def test_side_direction_points_at_the_opponent():
    assert Side.FIRST.direction == 1.0
    assert Side.SECOND.direction == -1.0


def test_side_colorize_wraps_in_markup():
    assert Side.FIRST.colorize("Aldric") == "[bold blue]Aldric[/]"
    assert Side.SECOND.colorize("Hakon") == "[bold red]Hakon[/]"


def test_side_str_is_the_name():
    assert str(Side.SECOND) == "SECOND"


@pytest.mark.parametrize(
    "band, penalty",
    [
        (RangeBand.POINT_BLANK, 0),
        (RangeBand.SHORT, -4),
        (RangeBand.MEDIUM, -6),
        (RangeBand.LONG, -8),
    ],
)
def test_range_band_penalty(band, penalty):
    assert band.penalty == penalty
