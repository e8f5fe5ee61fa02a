"""
Combatant system module for the duel combat simulator.

This module handles the combat record of each fighter, its live state during
a duel, the two-party accessor used by the engine and status display.
"""

from .combatant_display import CombatantDisplay
from .main import Combatant
from .pair import CombatantPair, Matchup

__all__ = [
    # Import from combatant_display.py
    "CombatantDisplay",
    # Import from main.py
    "Combatant",
    # Import from pair.py
    "CombatantPair",
    "Matchup",
]
