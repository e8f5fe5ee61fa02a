"""
Attack resolution module for the simulator.

Resolves a single exchange between an attacker and a defender: opposed
penetrating d20 rolls, defense bonuses, shield cover and blocks, shield
breakage and two-handed readiness bookkeeping.
"""

from combatant.main import Combatant
from core.constants import (
    ATTACK_DIE_SIDES,
    BREAKAGE_DIE_SIDES,
    DEFENSE_DIE_SIDES,
    RANGED_STATIONARY_DEFENSE_DIE_SIDES,
    SHIELD_BLOCK_MARGIN,
    SHIELD_MELEE_DEFENSE_BONUS,
    WEAPON_DEFENSE_BONUS,
    AttackResult,
)
from core.dice_parser import RandomSource, penetrating_roll
from items.shield import ShieldBreakageStep
from pydantic import BaseModel, Field

from .damage import reduce_by_armor, roll_hit_damage, roll_shield_damage


class AttackOutcome(BaseModel):
    """The result of a single attack, with everything needed to describe it."""

    attacker: str = Field(description="Name of the attacker.")
    defender: str = Field(description="Name of the defender.")
    weapon_name: str = Field(description="Weapon used by the attacker.")
    result: AttackResult = Field(description="Hit, shield block or miss.")
    attack_total: int = Field(description="Attack total after modifiers and cover.")
    attack_die: int = Field(description="Penetrating d20 rolled by the attacker.")
    defense_total: int = Field(description="Defense total after modifiers.")
    defense_die: int = Field(description="Penetrating die rolled by the defender.")
    defense_die_sides: int = Field(description="Faces of the defense die.")
    damage: int = Field(default=0, description="Hit points taken by the defender.")
    damage_detail: str = Field(default="[0]", description="Trace of the damage roll.")
    shield_name: str | None = Field(default=None, description="Blocking shield.")
    shield_damage: int = Field(default=0, description="Raw damage taken by the shield.")
    shield_broken: bool = Field(default=False, description="Whether the shield broke.")
    defender_hp: int = Field(description="Defender hit points afterwards, clamped at 0.")

    @property
    def hit(self) -> bool:
        return self.result == AttackResult.HIT

    @property
    def shield_block(self) -> bool:
        return self.result == AttackResult.SHIELD_BLOCK

    @property
    def description(self) -> str:
        """Human-readable account of the exchange, for the combat log."""
        rolls = (
            f"(atk {self.attack_total} [d{ATTACK_DIE_SIDES}p={self.attack_die}] "
            f"vs def {self.defense_total} [d{self.defense_die_sides}p={self.defense_die}])"
        )
        if self.result == AttackResult.HIT:
            return (
                f"{self.attacker} hits {self.defender} with {self.weapon_name} {rolls} "
                f"for {self.damage} dmg {self.damage_detail} (hp {self.defender_hp})"
            )
        if self.result == AttackResult.SHIELD_BLOCK:
            status = "shield broken" if self.shield_broken else "shield intact"
            return (
                f"{self.defender} blocks {self.attacker} with {self.shield_name} {rolls}; "
                f"shield dmg {self.shield_damage} {self.damage_detail} ({status}), "
                f"hp {self.defender_hp}"
            )
        return f"{self.attacker} misses {self.defender} with {self.weapon_name} {rolls}"


def defense_die_sides(is_ranged: bool, moved_last_tick: bool, has_shield: bool) -> int:
    """
    Chooses the defense die.

    Only a stationary, unshielded target of a ranged attack is reduced to a
    d12p; every other defense rolls a d20p.
    """
    if is_ranged and not moved_last_tick and not has_shield:
        return RANGED_STATIONARY_DEFENSE_DIE_SIDES
    return DEFENSE_DIE_SIDES


def weapon_defense_bonus(defender: Combatant, is_ranged: bool) -> int:
    """Returns the +4 granted by defensive weapons or two-handed readiness."""
    if is_ranged:
        return 0
    if defender.weapon_defense_always or (
        defender.two_hand_grip and defender.defense_bonus_ready
    ):
        return WEAPON_DEFENSE_BONUS
    return 0


def shield_defense_bonus(defender: Combatant, is_ranged: bool) -> int:
    """Returns the defense contribution of an intact shield."""
    if not defender.has_intact_shield():
        return 0
    base = 0 if is_ranged else SHIELD_MELEE_DEFENSE_BONUS
    return base + defender.shield.defense_bonus


def breakage_roll(step: ShieldBreakageStep, rng: RandomSource) -> bool:
    """
    Decides whether a breakage step breaks the shield.

    Without a save modifier the shield breaks. Otherwise the attacker's d20p
    is opposed by the defender's d20p plus the modifier, ties going to the
    attacker.
    """
    if step.save_mod is None:
        return True
    attacker_roll = penetrating_roll(BREAKAGE_DIE_SIDES, rng)
    defender_roll = penetrating_roll(BREAKAGE_DIE_SIDES, rng) + step.save_mod
    return attacker_roll >= defender_roll


def check_shield_breakage(
    steps: list[ShieldBreakageStep],
    raw_damage: int,
    rng: RandomSource,
) -> bool:
    """
    Checks raw shield damage against the four ascending breakage steps.

    Args:
        steps (list[ShieldBreakageStep]): The shield's breakage steps.
        raw_damage (int): Shield damage before any reduction.
        rng (RandomSource): The random source for opposed saves.

    Returns:
        bool: True if the shield breaks.

    """
    if raw_damage >= steps[-1].threshold:
        return True
    for step in reversed(steps[:-1]):
        if raw_damage >= step.threshold:
            return breakage_roll(step, rng)
    return False


def _update_readiness(attacker: Combatant, defender: Combatant) -> None:
    # Being attacked spends the guard; swinging a two-handed weapon earns one.
    if defender.earns_two_hand_readiness and defender.defense_bonus_ready:
        defender.defense_bonus_ready = False
    if attacker.earns_two_hand_readiness:
        attacker.defense_bonus_ready = True


def resolve_attack(
    attacker: Combatant,
    defender: Combatant,
    range_mod: int,
    is_ranged: bool,
    rng: RandomSource,
    min_hit_damage: int = 0,
) -> AttackOutcome:
    """
    Resolves one attack and applies its consequences to the defender.

    Args:
        attacker (Combatant): The attacking combatant.
        defender (Combatant): The defending combatant.
        range_mod (int): Range band penalty, 0 for melee.
        is_ranged (bool): Whether the attack is made with a ranged weapon.
        rng (RandomSource): The random source to draw from.
        min_hit_damage (int): Least damage a landed hit deals after armor.

    Returns:
        AttackOutcome: The outcome, including its log description.

    """
    shield_active = defender.has_intact_shield()
    defense_mod = 0 if is_ranged else defender.defense_mod
    sides = defense_die_sides(is_ranged, defender.moved_last_tick, shield_active)

    attack_die = penetrating_roll(ATTACK_DIE_SIDES, rng)
    defense_die = penetrating_roll(sides, rng)

    attack_total = attack_die + attacker.attack_bonus + range_mod
    if is_ranged and shield_active and defender.shield.cover_value is not None:
        attack_total = min(attack_total, defender.shield.cover_value)
    defense_total = (
        defense_die
        + defense_mod
        + weapon_defense_bonus(defender, is_ranged)
        + shield_defense_bonus(defender, is_ranged)
    )

    result = AttackResult.MISS
    damage = 0
    damage_detail = "[0]"
    shield_damage = 0
    shield_broken = False

    if attack_total >= defense_total:
        result = AttackResult.HIT
        raw, damage_detail = roll_hit_damage(attacker, rng)
        damage = max(reduce_by_armor(raw, attacker, defender), min_hit_damage)
        defender.take_damage(damage)
    elif (
        shield_active
        and not is_ranged
        and defense_total - attack_total < SHIELD_BLOCK_MARGIN
    ):
        result = AttackResult.SHIELD_BLOCK
        shield_damage, damage_detail = roll_shield_damage(attacker, rng)
        absorbed = max(shield_damage - defender.shield.damage_reduction, 0)
        damage = reduce_by_armor(absorbed, attacker, defender)
        defender.take_damage(damage)
        if defender.shield.breakage is not None:
            shield_broken = check_shield_breakage(
                defender.shield.breakage, shield_damage, rng
            )
        if shield_broken:
            defender.break_shield()

    if not is_ranged:
        _update_readiness(attacker, defender)

    return AttackOutcome(
        attacker=attacker.name,
        defender=defender.name,
        weapon_name=attacker.weapon_name,
        result=result,
        attack_total=attack_total,
        attack_die=attack_die,
        defense_total=defense_total,
        defense_die=defense_die,
        defense_die_sides=sides,
        damage=damage,
        damage_detail=damage_detail,
        shield_name=defender.shield.name if defender.shield is not None else None,
        shield_damage=shield_damage,
        shield_broken=shield_broken,
        defender_hp=defender.display_hp,
    )
