# simulation.py
import random
from collections.abc import Callable

from combatant.main import Combatant
from combatant.pair import CombatantPair
from core.constants import (
    ATTACK_TIME_EPSILON,
    DEFAULT_SEED,
    KITE_BACKSTEP_FT,
    MIN_REACH_FT,
    SHORT_REACH_HANDICAP_S,
    TICK_EPSILON,
    Side,
)
from core.dice_parser import RandomSource
from core.logging import log_debug, log_info, log_warning
from items.range_bands import range_modifier_for_weapon
from pydantic import BaseModel, Field

from combat.attack import resolve_attack

# Positions closer than this are considered unchanged.
MOVE_EPSILON = 1e-6


class SimConfig(BaseModel):
    """Configuration of a duel."""

    start_distance: float = Field(
        default=20.0,
        ge=0,
        description="Separation of the two fighters at the start, in feet.",
    )
    disengage_distance: float = Field(
        default=1.0,
        ge=0,
        description="Distance beyond which two melee fighters close without attacking.",
    )
    min_hit_damage: int = Field(
        default=0,
        ge=0,
        description="Least damage a landed hit deals after armor.",
    )
    seed: int = Field(
        default=DEFAULT_SEED,
        description="Seed of the random source, applied on every reset.",
    )


def disengage_distance_for(first: Combatant, second: Combatant) -> float:
    """Returns the distance at which either fighter could start attacking."""
    return max(first.engagement_range, second.engagement_range)


class Simulation:
    """Runs a one-on-one duel in discrete one-second ticks.

    The simulation owns the two positions, the two combatants and the random
    source. It is the only place where combatant state is mutated, and given
    the same records, configuration and number of ticks it always produces
    the same combat log.
    """

    def __init__(
        self,
        config: SimConfig | None = None,
        rng_factory: Callable[[int], RandomSource] = random.Random,
    ):
        """Initialize the simulation with two placeholder combatants.

        Args:
            config (SimConfig | None): The duel configuration. Defaults to SimConfig().
            rng_factory (Callable[[int], RandomSource]): Builds the random source
                from the configured seed on every reset. Defaults to random.Random.

        """
        self._rng_factory = rng_factory
        self.config: SimConfig = config if config is not None else SimConfig()
        self.positions: dict[Side, float] = {}
        self.combatants: CombatantPair = CombatantPair(Combatant(), Combatant())
        self.elapsed_seconds: int = 0
        self.done: bool = False
        self.last_event: str | None = None
        self.combat_log: list[str] = []
        self._rng: RandomSource = rng_factory(self.config.seed)
        self._tick_accum: float = 0.0
        self.reset()

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def reset(self) -> None:
        """Returns the duel to its starting state and reseeds the random source."""
        self.positions = {
            Side.FIRST: 0.0,
            Side.SECOND: self.config.start_distance,
        }
        self.elapsed_seconds = 0
        self.done = False
        self.last_event = None
        self.combat_log = []
        self._rng = self._rng_factory(self.config.seed)
        self._tick_accum = 0.0
        self.combatants.reset_state()
        log_info(
            "Duel reset",
            {
                "first": self.combatants.first.name,
                "second": self.combatants.second.name,
                "distance": self.config.start_distance,
            },
        )

    def reset_with_combatants(self, first: Combatant, second: Combatant) -> None:
        """Replaces both combatants with copies of the given records and resets.

        Args:
            first (Combatant): The record of the fighter starting at position 0.
            second (Combatant): The record of the fighter starting at the start distance.

        """
        self.combatants = CombatantPair(
            first.model_copy(deep=True),
            second.model_copy(deep=True),
        )
        self.reset()

    # ============================================================================
    # TIME
    # ============================================================================

    def update(self, dt: float) -> None:
        """Advances the duel by an arbitrary amount of time.

        Fractional time is accumulated and one tick runs per whole second
        crossed, stopping early once the duel is over.
        """
        if self.done:
            return
        self._tick_accum += dt
        while self._tick_accum >= 1.0 - TICK_EPSILON:
            self._tick_accum = max(self._tick_accum - 1.0, 0.0)
            self.tick()
            if self.done:
                break

    def run(self, max_seconds: int = 120) -> bool:
        """Ticks until the duel is over or max_seconds have elapsed.

        Args:
            max_seconds (int): Safety cutoff for duels where nobody can land a blow.

        Returns:
            bool: True if the duel finished, False if the cutoff was reached.

        """
        while not self.done and self.elapsed_seconds < max_seconds:
            self.tick()
        if not self.done:
            log_warning(
                "Duel stopped at the safety cutoff",
                {"elapsed": self.elapsed_seconds, "distance": self.distance()},
            )
        return self.done

    def tick(self) -> None:
        """Advances the duel by exactly one second."""
        if self.done:
            return
        first, second = self.combatants.first, self.combatants.second
        old_positions = dict(self.positions)
        any_ranged = first.is_ranged or second.is_ranged

        if not any_ranged and self.distance() > max(
            self.config.disengage_distance, MIN_REACH_FT
        ):
            # The fight has not begun: both close in.
            for side, combatant in self.combatants.items():
                self._advance(side, combatant.move_speed)
                combatant.clear_attack_timer()
        else:
            self._resolve_combat_round()
            self._reposition(self.distance(), any_ranged)

        for side, combatant in self.combatants.items():
            combatant.moved_last_tick = (
                abs(self.positions[side] - old_positions[side]) > MOVE_EPSILON
            )
        self.elapsed_seconds += 1

    # ============================================================================
    # POSITIONS
    # ============================================================================

    def distance(self) -> float:
        """Returns the separation of the two fighters, never negative."""
        return max(self.positions[Side.SECOND] - self.positions[Side.FIRST], 0.0)

    def position(self, side: Side) -> float:
        return self.positions[side]

    def _advance(self, side: Side, feet: float) -> None:
        self.positions[side] += side.direction * max(feet, 0.0)

    def _backstep(self, side: Side) -> None:
        self.positions[side] -= side.direction * KITE_BACKSTEP_FT

    def _reposition(self, distance: float, any_ranged: bool) -> None:
        """Moves the fighters after a combat round.

        With a ranged weapon in play, archers keep their distance while still
        in range and close otherwise, and melee fighters close until their own
        reach. Between two melee fighters only the shorter weapon advances.
        """
        first, second = self.combatants.first, self.combatants.second
        min_reach = min(first.effective_reach, second.effective_reach)
        if distance <= min_reach:
            return

        if any_ranged:
            for side, combatant in self.combatants.items():
                if combatant.is_ranged:
                    if distance <= combatant.max_range:
                        self._backstep(side)
                    else:
                        self._advance(side, combatant.move_speed)
                elif distance > combatant.effective_reach:
                    self._advance(side, combatant.move_speed)
        elif first.effective_reach < second.effective_reach:
            self._advance(Side.FIRST, first.move_speed)
        elif second.effective_reach < first.effective_reach:
            self._advance(Side.SECOND, second.move_speed)

    # ============================================================================
    # COMBAT
    # ============================================================================

    def _resolve_combat_round(self) -> None:
        """Lets each side attack once, FIRST before SECOND, if able and due."""
        now = float(self.elapsed_seconds)
        distance = self.distance()
        events: list[str] = []

        for side in Side:
            attacker, defender = self.combatants.matchup(side)
            if attacker.is_defeated() or defender.is_defeated():
                continue

            is_ranged = attacker.is_ranged
            range_mod = None
            if is_ranged:
                range_mod = range_modifier_for_weapon(attacker.weapon_name, distance)
                if range_mod is None:
                    continue
            elif distance > attacker.effective_reach:
                continue

            delay = 0.0
            if not is_ranged and attacker.reach_ft < defender.reach_ft:
                delay = SHORT_REACH_HANDICAP_S
            attacker.ensure_attack_scheduled(now, delay)

            if now + ATTACK_TIME_EPSILON < attacker.next_attack_time:
                continue

            outcome = resolve_attack(
                attacker,
                defender,
                range_mod or 0,
                is_ranged,
                self._rng,
                min_hit_damage=self.config.min_hit_damage,
            )
            events.append(outcome.description)
            attacker.reschedule_attack()

            if defender.is_defeated():
                self.done = True
                log_info(
                    f"{defender.name} is defeated by {attacker.name}",
                    {"t": self.elapsed_seconds, "hp": defender.hp},
                )
                break

        if events:
            line = f"t={self.elapsed_seconds}s | " + " | ".join(events)
            self.last_event = line
            self.combat_log.append(line)
            log_debug(line)
