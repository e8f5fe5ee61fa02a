"""
Combatant management module for the simulator.

Defines the Combatant class: the flattened combat record of one fighter,
built by an external resolver from ability scores, equipment and catalogs,
together with the small amount of state that changes during a duel.
"""

from typing import Any

from core.constants import (
    DEFAULT_DAMAGE_EXPR,
    MIN_REACH_FT,
    MIN_WEAPON_SPEED_S,
)
from items.range_bands import is_ranged_weapon, max_range_for_weapon
from items.shield import Shield
from pydantic import BaseModel, Field

from .combatant_display import CombatantDisplay


class Combatant(BaseModel):
    """
    Represents one fighter of a duel.

    The static part describes what the fighter can do and never changes
    during an engagement. The live part (hit points, attack timer, two-handed
    readiness, movement flag and shield integrity) is reset by reset_state()
    and mutated only by the simulation.

    Attributes:
        name (str): The name of the combatant.
        weapon_name (str): Weapon identity, also the key of the range table.
        attack_bonus (int): Added to every attack roll.
        defense_mod (int): Base defense value against melee attacks.
        armor_dr (int): Armor damage reduction.
        armor_is_heavy (bool): Heavy armor is always subject to penetration.
        armor_penetration (int): How much of the enemy's armor DR the weapon ignores.
        damage_expr (str): Damage expression of the weapon.
        shield_damage_expr (str | None): Damage expression used against a blocking shield.
        strength_damage (int): Flat damage bonus.
        weapon_speed (float): Seconds between two attacks.
        reach_ft (float): Melee reach in feet.
        move_speed (float): Feet covered per second of movement.
        two_hand_grip (bool): Whether the weapon is gripped with both hands.
        use_jab (bool): Whether the combatant attacks with quick jabs.
        jab_special_expr (str | None): Damage expression of the jab, if special.
        has_weapon (bool): False for unarmed fighters.
        weapon_defense_always (bool): The weapon always grants its defense bonus.
        max_hp (int): Maximum hit points.
        shield (Shield | None): The shield carried, if any.

    """

    # === Static properties ===

    name: str = Field(default="Combatant", description="The name of the combatant.")
    weapon_name: str = Field(default="Weapon", description="The weapon identity.")
    attack_bonus: int = Field(default=0, description="Attack roll bonus.")
    defense_mod: int = Field(default=0, description="Base defense value.")
    armor_dr: int = Field(default=0, description="Armor damage reduction.")
    armor_is_heavy: bool = Field(default=False, description="Heavy armor flag.")
    armor_penetration: int = Field(default=0, description="Weapon armor penetration.")
    damage_expr: str = Field(
        default=DEFAULT_DAMAGE_EXPR,
        description="The damage expression (e.g., '2d8p').",
    )
    shield_damage_expr: str | None = Field(
        default=None,
        description="Damage expression rolled when the opponent's shield blocks.",
    )
    strength_damage: int = Field(default=0, description="Flat damage bonus.")
    weapon_speed: float = Field(default=10.0, description="Weapon cycle time in seconds.")
    reach_ft: float = Field(default=1.0, description="Weapon reach in feet.")
    move_speed: float = Field(default=5.0, description="Movement per second in feet.")
    two_hand_grip: bool = Field(default=False, description="Two-handed grip flag.")
    use_jab: bool = Field(default=False, description="Jab attack flag.")
    jab_special_expr: str | None = Field(
        default=None,
        description="Special damage expression of the jab, if any.",
    )
    has_weapon: bool = Field(default=False, description="Whether a weapon is wielded.")
    weapon_defense_always: bool = Field(
        default=False,
        description="Whether the weapon always grants its defense bonus.",
    )
    max_hp: int = Field(default=10, description="Maximum hit points.", ge=1)
    shield: Shield | None = Field(default=None, description="The shield carried.")

    # === Live state ===

    hp: int = Field(default=0, description="Current hit points.")
    next_attack_time: float | None = Field(
        default=None,
        description="Absolute time of the next permitted attack.",
    )
    defense_bonus_ready: bool = Field(
        default=False,
        description="One-shot defense bonus earned by a two-handed swing.",
    )
    moved_last_tick: bool = Field(
        default=False,
        description="Whether the combatant changed position during the last tick.",
    )
    shield_intact: bool = Field(
        default=False,
        description="Whether the carried shield is still intact.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization and arms the live state."""
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string")
        if not self.weapon_name or not isinstance(self.weapon_name, str):
            raise ValueError("weapon_name must be a non-empty string")
        self.reset_state()

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def reset_state(self) -> None:
        """Returns the combatant to its fresh state."""
        self.hp = self.max_hp
        self.next_attack_time = None
        self.defense_bonus_ready = False
        self.moved_last_tick = False
        self.shield_intact = self.shield is not None

    def is_alive(self) -> bool:
        """Returns True while the combatant has hit points left."""
        return self.hp > 0

    def is_defeated(self) -> bool:
        """Returns True once hit points have dropped to zero or below."""
        return self.hp <= 0

    @property
    def display_hp(self) -> int:
        """Hit points as shown to observers, never below zero."""
        return max(self.hp, 0)

    def take_damage(self, amount: int) -> int:
        """
        Removes hit points.

        Args:
            amount (int): The damage to apply, negative values are ignored.

        Returns:
            int: The damage actually applied.

        """
        amount = max(amount, 0)
        self.hp -= amount
        return amount

    # ============================================================================
    # WEAPON PROPERTIES
    # ============================================================================

    @property
    def is_ranged(self) -> bool:
        """Whether the weapon is a ranged weapon."""
        return is_ranged_weapon(self.weapon_name)

    @property
    def max_range(self) -> float | None:
        """The maximum range of a ranged weapon, None for melee weapons."""
        return max_range_for_weapon(self.weapon_name)

    @property
    def effective_reach(self) -> float:
        """Reach used for engagement checks, never below one foot."""
        return max(self.reach_ft, MIN_REACH_FT)

    @property
    def engagement_range(self) -> float:
        """The farthest distance the combatant can attack from."""
        max_range = self.max_range
        return max_range if max_range is not None else self.effective_reach

    @property
    def earns_two_hand_readiness(self) -> bool:
        """Whether swinging leaves the combatant with a one-shot guard."""
        return self.two_hand_grip and self.has_weapon and not self.weapon_defense_always

    # ============================================================================
    # SHIELD
    # ============================================================================

    def has_intact_shield(self) -> bool:
        """Returns True if the combatant carries a shield that is still whole."""
        return self.shield is not None and self.shield_intact

    def break_shield(self) -> None:
        """Marks the shield as broken for the rest of the engagement."""
        self.shield_intact = False

    # ============================================================================
    # ATTACK TIMER
    # ============================================================================

    def ensure_attack_scheduled(self, now: float, delay: float = 0.0) -> None:
        """Schedules the first attack if none is scheduled yet."""
        if self.next_attack_time is None:
            self.next_attack_time = now + delay

    def clear_attack_timer(self) -> None:
        """Forgets the scheduled attack, used while the fighters are apart."""
        self.next_attack_time = None

    def reschedule_attack(self) -> None:
        """Moves the next attack one weapon cycle after the previous one."""
        if self.next_attack_time is None:
            return
        self.next_attack_time += max(self.weapon_speed, MIN_WEAPON_SPEED_S)

    # ============================================================================
    # DISPLAY
    # ============================================================================

    @property
    def display(self) -> CombatantDisplay:
        """Returns the display helper of this combatant."""
        return CombatantDisplay(owner=self)

    @property
    def colored_name(self) -> str:
        """Returns the name with color markup for terminal display."""
        return f"[bold]{self.name}[/]"
