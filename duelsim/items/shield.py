"""
Shield module for the simulator.

Defines the Shield descriptor carried by a combatant, including its defense
bonus, damage reduction, ranged cover cap and breakage thresholds.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

BREAKAGE_STEPS = 4


class ShieldBreakageStep(BaseModel):
    """A breakage threshold, optionally allowing the defender a save."""

    model_config = ConfigDict(frozen=True)

    threshold: int = Field(
        description="Raw shield damage needed to reach this step.",
    )
    save_mod: int | None = Field(
        default=None,
        description=(
            "Modifier to the defender's opposed save. Without one, reaching "
            "the step breaks the shield outright."
        ),
    )


class Shield(BaseModel):
    """
    Represents a shield that can interpose itself between a blow and its bearer.

    While intact a shield adds its defense bonus, absorbs melee attacks that
    barely miss, and caps ranged attack totals at its cover value.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        description="The name of the shield.",
    )
    defense_bonus: int = Field(
        default=0,
        description="Defense bonus granted while the shield is intact.",
    )
    damage_reduction: int = Field(
        default=0,
        description="Damage absorbed by the shield when it blocks.",
        ge=0,
    )
    cover_value: int | None = Field(
        default=None,
        description="Cap applied to ranged attack totals while intact.",
    )
    breakage: list[ShieldBreakageStep] | None = Field(
        default=None,
        description="Four ascending breakage steps, or None if unbreakable.",
    )

    @field_validator("breakage")
    @classmethod
    def check_breakage(
        cls, steps: list[ShieldBreakageStep] | None
    ) -> list[ShieldBreakageStep] | None:
        if steps is None:
            return None
        if len(steps) != BREAKAGE_STEPS:
            raise ValueError(
                f"shield breakage needs exactly {BREAKAGE_STEPS} steps, got {len(steps)}"
            )
        thresholds = [step.threshold for step in steps]
        if thresholds != sorted(thresholds):
            raise ValueError(f"shield breakage thresholds must ascend: {thresholds}")
        return steps

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.name or not isinstance(self.name, str):
            raise ValueError("Shield name must be a non-empty string")

    @property
    def colored_name(self) -> str:
        """Returns the shield name with color markup for terminal display."""
        return f"[bold cyan]{self.name}[/]"
