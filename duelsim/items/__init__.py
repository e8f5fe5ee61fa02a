"""
Items system module for the duel combat simulator.

This module contains the equipment data the engine consults directly: the
range band table of ranged weapons and the shield descriptor.
"""

from .range_bands import (
    RANGED_WEAPONS,
    RangeBands,
    get_range_bands,
    is_ranged_weapon,
    max_range_for_weapon,
    range_band_for_distance,
    range_modifier_for_weapon,
)
from .shield import Shield, ShieldBreakageStep

__all__ = [
    # Import from range_bands.py
    "RANGED_WEAPONS",
    "RangeBands",
    "get_range_bands",
    "is_ranged_weapon",
    "max_range_for_weapon",
    "range_band_for_distance",
    "range_modifier_for_weapon",
    # Import from shield.py
    "Shield",
    "ShieldBreakageStep",
]
