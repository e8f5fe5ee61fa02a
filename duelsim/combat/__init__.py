"""
Combat system module for the duel combat simulator.

This module handles all combat mechanics including damage calculation, single
attack resolution and the tick loop driving a duel.
"""

from .attack import (
    AttackOutcome,
    breakage_roll,
    check_shield_breakage,
    defense_die_sides,
    resolve_attack,
)
from .damage import effective_armor_reduction, roll_hit_damage, roll_shield_damage
from .simulation import SimConfig, Simulation, disengage_distance_for

__all__ = [
    # Import from attack.py
    "AttackOutcome",
    "breakage_roll",
    "check_shield_breakage",
    "defense_die_sides",
    "resolve_attack",
    # Import from damage.py
    "effective_armor_reduction",
    "roll_hit_damage",
    "roll_shield_damage",
    # Import from simulation.py
    "SimConfig",
    "Simulation",
    "disengage_distance_for",
]
