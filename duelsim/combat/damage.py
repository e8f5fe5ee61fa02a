"""
Damage module for the simulator.

Handles damage rolling and armor interaction: jab attacks, flat strength
bonuses, shield-block damage and armor penetration.
"""

from combatant.main import Combatant
from core.constants import ARMOR_PENETRATION_THRESHOLD
from core.dice_parser import (
    RandomSource,
    roll_damage_expr,
    roll_damage_expr_nonpenetrating,
)


def effective_armor_reduction(
    armor_dr: int,
    armor_is_heavy: bool,
    armor_penetration: int,
) -> int:
    """
    Computes the armor damage reduction that actually applies to a blow.

    Penetration only bites once armor is substantial: below the threshold,
    light armor keeps its full reduction. Negative penetration makes armor
    more effective.

    Args:
        armor_dr (int): The defender's armor damage reduction.
        armor_is_heavy (bool): Heavy armor is always subject to penetration.
        armor_penetration (int): The attacking weapon's armor penetration.

    Returns:
        int: The reduction to subtract from raw damage.

    """
    if armor_dr >= ARMOR_PENETRATION_THRESHOLD or armor_is_heavy:
        return max(armor_dr - armor_penetration, 0)
    return armor_dr


def reduce_by_armor(raw: int, attacker: Combatant, defender: Combatant) -> int:
    """Applies the defender's armor to raw damage, never below zero."""
    reduction = effective_armor_reduction(
        defender.armor_dr,
        defender.armor_is_heavy,
        attacker.armor_penetration,
    )
    return max(raw - reduction, 0)


def roll_hit_damage(attacker: Combatant, rng: RandomSource) -> tuple[int, str]:
    """
    Rolls the raw damage of a landed blow, before armor.

    Jabs never penetrate. A jab with a special expression rolls that
    expression, even an empty one that falls back to the default die. A plain
    jab rolls the weapon expression and halves the result.

    Args:
        attacker (Combatant): The combatant dealing the blow.
        rng (RandomSource): The random source to draw from.

    Returns:
        tuple[int, str]: Raw damage (at least zero) and the roll trace.

    """
    if attacker.use_jab:
        jab_expr = (
            attacker.jab_special_expr
            if attacker.jab_special_expr is not None
            else attacker.damage_expr
        )
        rolled, detail = roll_damage_expr_nonpenetrating(jab_expr, rng)
    else:
        rolled, detail = roll_damage_expr(attacker.damage_expr, rng)
    raw = rolled + attacker.strength_damage
    if attacker.use_jab and attacker.jab_special_expr is None:
        raw //= 2
    return max(raw, 0), detail


def roll_shield_damage(attacker: Combatant, rng: RandomSource) -> tuple[int, str]:
    """
    Rolls the raw damage a blocking shield has to absorb.

    Args:
        attacker (Combatant): The combatant whose blow was blocked.
        rng (RandomSource): The random source to draw from.

    Returns:
        tuple[int, str]: Raw shield damage (at least zero) and the roll trace.

    """
    expr = attacker.shield_damage_expr or attacker.damage_expr
    rolled, detail = roll_damage_expr(expr, rng)
    return max(rolled + attacker.strength_damage, 0), detail
