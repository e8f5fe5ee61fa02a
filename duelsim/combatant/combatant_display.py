"""
Combatant display module for the simulator.

Provides display functionality for combatants, including health bars and
status lines meant for callers presenting a running duel.
"""

from typing import Any

from core.utils import make_bar


class CombatantDisplay:
    """
    Handles display and formatting for Combatant objects.

    Attributes:
        owner (Any):
            The Combatant instance that this display is associated with.

    """

    def __init__(self, owner: Any) -> None:
        self.owner = owner

    def get_status_line(
        self,
        show_numbers: bool = True,
        show_bars: bool = False,
    ) -> str:
        """
        Get a formatted status line with hit points, weapon and shield state.

        Args:
            show_numbers (bool): Whether to show hit points as numbers. Defaults to True.
            show_bars (bool): Whether to show a hit point bar. Defaults to False.

        Returns:
            str: A rich-markup status line.

        """
        owner = self.owner
        name_width = min(max(len(owner.name), 8), 16)
        status = f"[bold]{owner.name:<{name_width}}[/] | {owner.weapon_name} "

        if show_numbers:
            status += f"| [green]HP:{owner.display_hp:>3}/{owner.max_hp}[/] "
        if show_bars:
            status += f"{make_bar(owner.hp, owner.max_hp, length=8, color='green')} "

        if owner.shield is not None:
            if owner.shield_intact:
                status += f"| {owner.shield.colored_name} "
            else:
                status += f"| [dim strike]{owner.shield.name}[/] "

        if owner.defense_bonus_ready:
            status += "| [yellow]guarded[/] "

        return status.rstrip()
