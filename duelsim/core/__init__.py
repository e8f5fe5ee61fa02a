"""
Core system module for the duel combat simulator.

This module contains the fundamental components the engine is built on,
including rule constants, dice expression evaluation, logging and console
display utilities.
"""

from .constants import (
    DEFAULT_DAMAGE_EXPR,
    AttackResult,
    NiceEnum,
    RangeBand,
    Side,
)
from .dice_parser import (
    RandomSource,
    clean_damage_expr,
    evaluate,
    evaluate_expression,
    expected_value,
    penetrating_roll,
    penetrating_roll_with,
    roll_damage_expr,
    roll_damage_expr_nonpenetrating,
    roll_expression,
    standard_roll,
)
from .utils import (
    cprint,
    crule,
    format_feet,
    make_bar,
)

__all__ = [
    # Import from constants.py
    "DEFAULT_DAMAGE_EXPR",
    "AttackResult",
    "NiceEnum",
    "RangeBand",
    "Side",
    # Import from dice_parser.py
    "RandomSource",
    "clean_damage_expr",
    "evaluate",
    "evaluate_expression",
    "expected_value",
    "penetrating_roll",
    "penetrating_roll_with",
    "roll_damage_expr",
    "roll_damage_expr_nonpenetrating",
    "roll_expression",
    "standard_roll",
    # Import from utils.py
    "cprint",
    "crule",
    "format_feet",
    "make_bar",
]
