"""
Constants and enumerations for the simulator.

Defines the rule constants of the duel engine together with the enumerations
for combatant sides, range bands and attack outcomes used throughout the
simulator.
"""

from enum import Enum

# Expression used whenever a damage expression cannot be made sense of.
DEFAULT_DAMAGE_EXPR = "d4p"

# Dice used by the attack/defense resolution.
ATTACK_DIE_SIDES = 20
DEFENSE_DIE_SIDES = 20
# A stationary, unshielded target of a ranged attack only rolls a d12p.
RANGED_STATIONARY_DEFENSE_DIE_SIDES = 12
BREAKAGE_DIE_SIDES = 20

# Flat defense bonus of two-handed readiness and "always" defensive weapons.
WEAPON_DEFENSE_BONUS = 4
# Baseline defense granted by an intact shield against melee attacks.
SHIELD_MELEE_DEFENSE_BONUS = 4
# A shield only interposes when defense beat the attack by less than this.
SHIELD_BLOCK_MARGIN = 10
# Armor penetration only matters once armor damage reduction reaches this.
ARMOR_PENETRATION_THRESHOLD = 5

# Movement.
KITE_BACKSTEP_FT = 5.0
MIN_REACH_FT = 1.0
# Melee attackers with the shorter weapon need a beat to close in.
SHORT_REACH_HANDICAP_S = 1.0
MIN_WEAPON_SPEED_S = 1.0
# Tolerance applied when comparing the clock to a scheduled attack.
ATTACK_TIME_EPSILON = 1e-4
# Tolerance applied when draining accumulated update time into whole ticks.
TICK_EPSILON = 1e-9

# Random source seed used on every reset.
DEFAULT_SEED = 1


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name


class Side(NiceEnum):
    """Identifies one of the two parties of a duel."""

    FIRST = 0
    SECOND = 1

    @property
    def opponent(self) -> "Side":
        """Returns the other side of the duel."""
        return Side.SECOND if self is Side.FIRST else Side.FIRST

    @property
    def direction(self) -> float:
        """Returns the sign of movement toward the opponent."""
        return 1.0 if self is Side.FIRST else -1.0

    @property
    def color(self) -> str:
        """Returns the color string associated with this side."""
        return {
            Side.FIRST: "bold blue",
            Side.SECOND: "bold red",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies side color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class RangeBand(NiceEnum):
    """Distance brackets of a ranged weapon, each with its attack penalty."""

    POINT_BLANK = "POINT_BLANK"
    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"

    @property
    def penalty(self) -> int:
        """Returns the attack roll penalty of the band."""
        return {
            RangeBand.POINT_BLANK: 0,
            RangeBand.SHORT: -4,
            RangeBand.MEDIUM: -6,
            RangeBand.LONG: -8,
        }[self]


class AttackResult(NiceEnum):
    """Defines the outcome of a single attack."""

    HIT = "HIT"
    SHIELD_BLOCK = "SHIELD_BLOCK"
    MISS = "MISS"
