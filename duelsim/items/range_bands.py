"""
Range band module for the simulator.

Holds the static table of ranged weapons and their four graduated distance
bands. A weapon missing from the table is a melee weapon.
"""

from core.constants import RangeBand
from pydantic import BaseModel, ConfigDict, Field


class RangeBands(BaseModel):
    """
    The upper distance limit, in feet, of each band of a ranged weapon.

    A band limit of zero marks the band as unusable for the weapon.
    """

    model_config = ConfigDict(frozen=True)

    point_blank: float = Field(description="Limit of the point-blank band.", ge=0)
    short: float = Field(description="Limit of the short band.", ge=0)
    medium: float = Field(description="Limit of the medium band, 0 if unusable.", ge=0)
    long: float = Field(description="Limit of the long band, 0 if unusable.", ge=0)

    @property
    def max_range(self) -> float:
        """Returns the largest configured band limit."""
        return max(self.point_blank, self.short, self.medium, self.long)

    def band_for(self, distance: float) -> RangeBand | None:
        """
        Finds the band a target at the given distance falls in.

        Args:
            distance (float): Distance to the target in feet.

        Returns:
            RangeBand | None: The band, or None if the target is out of range.

        """
        if distance <= self.point_blank:
            return RangeBand.POINT_BLANK
        if distance <= self.short:
            return RangeBand.SHORT
        if distance <= self.medium and self.medium > 0:
            return RangeBand.MEDIUM
        if distance <= self.long and self.long > 0:
            return RangeBand.LONG
        return None


def _bands(point_blank: float, short: float, medium: float, long: float) -> RangeBands:
    return RangeBands(point_blank=point_blank, short=short, medium=medium, long=long)


RANGED_WEAPONS: dict[str, RangeBands] = {
    "Shortbow": _bands(50, 80, 120, 150),
    "Recurve bow": _bands(50, 80, 120, 150),
    "Longbow": _bands(60, 120, 160, 210),
    "Warbow": _bands(80, 160, 230, 300),
    "Light crossbow": _bands(60, 100, 140, 180),
    "Heavy crossbow": _bands(80, 140, 190, 250),
    "Hand crossbow": _bands(40, 70, 100, 120),
    "Arbalest": _bands(120, 220, 320, 400),
    "Sling": _bands(40, 80, 120, 160),
    "Throwing axe": _bands(20, 30, 40, 60),
    "Throwing knife": _bands(20, 30, 40, 50),
    "Dart": _bands(10, 20, 30, 40),
    "Javelin": _bands(30, 50, 70, 100),
    "Pilum": _bands(30, 40, 60, 80),
    "Bola": _bands(10, 20, 30, 50),
    "Lasso": _bands(10, 20, 30, 50),
    "Net": _bands(10, 15, 0, 0),
}


def get_range_bands(weapon_name: str) -> RangeBands | None:
    """Returns the range bands of a weapon, or None for melee weapons."""
    return RANGED_WEAPONS.get(weapon_name)


def is_ranged_weapon(weapon_name: str) -> bool:
    """Returns True if the weapon appears in the range table."""
    return weapon_name in RANGED_WEAPONS


def range_band_for_distance(weapon_name: str, distance: float) -> RangeBand | None:
    """
    Finds the band of a ranged weapon for the given distance.

    Args:
        weapon_name (str): The weapon to look up.
        distance (float): Distance to the target in feet.

    Returns:
        RangeBand | None: The band, or None if the weapon is melee or the
        target is out of range.

    """
    bands = get_range_bands(weapon_name)
    if bands is None:
        return None
    return bands.band_for(distance)


def range_modifier_for_weapon(weapon_name: str, distance: float) -> int | None:
    """
    Returns the attack penalty of a ranged weapon at the given distance.

    Args:
        weapon_name (str): The weapon to look up.
        distance (float): Distance to the target in feet.

    Returns:
        int | None: 0 or a negative penalty, or None when no attack is
        possible (out of range, or not a ranged weapon).

    """
    band = range_band_for_distance(weapon_name, distance)
    if band is None:
        return None
    return band.penalty


def max_range_for_weapon(weapon_name: str) -> float | None:
    """Returns the largest band limit of a ranged weapon, None for melee."""
    bands = get_range_bands(weapon_name)
    if bands is None:
        return None
    return bands.max_range
