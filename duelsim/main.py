"""
Main entry point for the duel combat simulator.

This script builds a few sample combat records and runs them against each
other, printing the distance, the events of every tick and the status of
both fighters. It demonstrates the engine with:
- A long two-handed blade against a sword-and-shield fighter
- An archer kiting a spearman
"""

import logging

from combat.simulation import SimConfig, Simulation, disengage_distance_for
from combatant.main import Combatant
from core.constants import Side
from core.logging import setup_logging
from core.utils import cprint, crule, format_feet
from items.shield import Shield, ShieldBreakageStep

# Safety cutoff, the engine itself never gives up on a stalemate.
MAX_SECONDS = 120

setup_logging(logging.WARNING)

# =============================================================================

kite_shield = Shield(
    name="Kite shield",
    defense_bonus=2,
    damage_reduction=3,
    cover_value=12,
    breakage=[
        ShieldBreakageStep(threshold=8, save_mod=4),
        ShieldBreakageStep(threshold=12, save_mod=2),
        ShieldBreakageStep(threshold=16, save_mod=0),
        ShieldBreakageStep(threshold=20),
    ],
)

greatsword = Combatant(
    name="Brunhild",
    weapon_name="Greatsword",
    attack_bonus=3,
    defense_mod=2,
    armor_dr=4,
    armor_penetration=2,
    damage_expr="2d8p",
    strength_damage=2,
    weapon_speed=3.0,
    reach_ft=3.5,
    move_speed=5.0,
    two_hand_grip=True,
    has_weapon=True,
    max_hp=30,
)

sword_and_board = Combatant(
    name="Aldric",
    weapon_name="Arming sword",
    attack_bonus=2,
    defense_mod=3,
    armor_dr=5,
    armor_is_heavy=True,
    armor_penetration=1,
    damage_expr="d8p+1",
    strength_damage=1,
    weapon_speed=2.0,
    reach_ft=2.5,
    move_speed=4.0,
    has_weapon=True,
    max_hp=28,
    shield=kite_shield,
)

archer = Combatant(
    name="Sigrun",
    weapon_name="Longbow",
    attack_bonus=4,
    defense_mod=1,
    armor_dr=2,
    damage_expr="d10p",
    weapon_speed=4.0,
    reach_ft=1.0,
    move_speed=6.0,
    has_weapon=True,
    max_hp=20,
)

spearman = Combatant(
    name="Hakon",
    weapon_name="Spear",
    attack_bonus=2,
    defense_mod=2,
    armor_dr=3,
    damage_expr="d10p",
    strength_damage=1,
    weapon_speed=3.0,
    reach_ft=4.0,
    move_speed=5.0,
    two_hand_grip=True,
    has_weapon=True,
    max_hp=24,
)

# =============================================================================


def run_duel(first: Combatant, second: Combatant, start_distance: float) -> None:
    """
    Run a duel between two records and print every tick.

    Args:
        first (Combatant): The fighter starting at position 0.
        second (Combatant): The fighter starting at start_distance.
        start_distance (float): Initial separation in feet.

    """
    crule(
        f"{Side.FIRST.colorize(first.name)} vs {Side.SECOND.colorize(second.name)}",
        style="bold green",
    )

    config = SimConfig(
        start_distance=start_distance,
        disengage_distance=disengage_distance_for(first, second),
    )
    sim = Simulation(config)
    sim.reset_with_combatants(first, second)

    while not sim.done and sim.elapsed_seconds < MAX_SECONDS:
        previous = sim.last_event
        sim.update(1.0)
        cprint(
            f"[dim]t={sim.elapsed_seconds:>3}s distance {format_feet(sim.distance())}[/]"
        )
        if sim.last_event is not None and sim.last_event != previous:
            cprint(sim.last_event, markup=False)

    for side, combatant in sim.combatants.items():
        cprint(side.colorize("●"), combatant.display.get_status_line(show_bars=True))

    if sim.done:
        side, winner = next((s, c) for s, c in sim.combatants.items() if c.is_alive())
        crule(
            f"{side.colorize(winner.name)} wins after {sim.elapsed_seconds}s",
            style="bold green",
        )
    else:
        crule(f"No winner after {MAX_SECONDS}s", style="bold yellow")


run_duel(greatsword, sword_and_board, start_distance=20.0)
run_duel(archer, spearman, start_distance=60.0)
