"""
Two-party accessor for the simulator.

A duel always has exactly two sides. CombatantPair stores one Combatant per
Side and hands out (actor, opponent) views, so the code resolving an exchange
never has to juggle raw indices for the attacker and the defender.
"""

from collections.abc import Iterator
from typing import NamedTuple

from core.constants import Side

from .main import Combatant


class Matchup(NamedTuple):
    """The view of a duel from one side: who acts and who faces them."""

    actor: Combatant
    opponent: Combatant


class CombatantPair:
    """Holds the two combatants of a duel, addressed by Side."""

    def __init__(self, first: Combatant, second: Combatant) -> None:
        if first is second:
            raise ValueError("A duel needs two distinct combatant objects")
        self._combatants: dict[Side, Combatant] = {
            Side.FIRST: first,
            Side.SECOND: second,
        }

    def __getitem__(self, side: Side) -> Combatant:
        return self._combatants[side]

    def __iter__(self) -> Iterator[Combatant]:
        return iter((self._combatants[Side.FIRST], self._combatants[Side.SECOND]))

    def items(self) -> Iterator[tuple[Side, Combatant]]:
        """Iterates over (side, combatant) in side order."""
        for side in Side:
            yield side, self._combatants[side]

    @property
    def first(self) -> Combatant:
        return self._combatants[Side.FIRST]

    @property
    def second(self) -> Combatant:
        return self._combatants[Side.SECOND]

    def matchup(self, side: Side) -> Matchup:
        """Returns the duel as seen from the given side."""
        return Matchup(self._combatants[side], self._combatants[side.opponent])

    def any_defeated(self) -> bool:
        """Returns True if either combatant is out of hit points."""
        return any(combatant.is_defeated() for combatant in self)

    def reset_state(self) -> None:
        """Returns both combatants to their fresh state."""
        for combatant in self:
            combatant.reset_state()
