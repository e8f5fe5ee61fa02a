"""
Tests for damage rolls and armor interaction.
"""

import pytest
from combat.damage import (
    effective_armor_reduction,
    reduce_by_armor,
    roll_hit_damage,
    roll_shield_damage,
)
from combatant.main import Combatant


@pytest.mark.parametrize(
    "armor_dr, heavy, penetration, expected",
    [
        (4, False, 3, 4),
        (5, False, 3, 2),
        (4, True, 3, 1),
        (6, False, 10, 0),
        (6, False, -2, 8),
        (3, False, -2, 3),
        (0, False, 0, 0),
    ],
)
def test_effective_armor_reduction(armor_dr, heavy, penetration, expected):
    """Test that penetration only matters against substantial or heavy armor."""
    assert effective_armor_reduction(armor_dr, heavy, penetration) == expected


def test_reduce_by_armor_never_negative():
    attacker = Combatant(armor_penetration=1)
    defender = Combatant(armor_dr=8)
    assert reduce_by_armor(3, attacker, defender) == 0
    assert reduce_by_armor(10, attacker, defender) == 3


def test_hit_damage_penetrates_and_adds_strength(scripted_random):
    attacker = Combatant(damage_expr="1d8p", strength_damage=2)
    assert roll_hit_damage(attacker, scripted_random(8, 3)) == (12, "[1d8p=10]")


def test_jab_without_special_expression_is_halved(scripted_random):
    attacker = Combatant(damage_expr="1d8p", strength_damage=2, use_jab=True)
    rng = scripted_random(7, 8)
    assert roll_hit_damage(attacker, rng) == (4, "[1d8=7]")
    assert rng.draws == [8]


def test_jab_never_penetrates(scripted_random):
    attacker = Combatant(damage_expr="1d8p", use_jab=True)
    rng = scripted_random(8, 8)
    assert roll_hit_damage(attacker, rng) == (4, "[1d8=8]")
    assert rng.draws == [8]


def test_jab_special_expression_is_not_halved(scripted_random):
    attacker = Combatant(
        damage_expr="2d8p",
        strength_damage=2,
        use_jab=True,
        jab_special_expr="1d4p",
    )
    assert roll_hit_damage(attacker, scripted_random(4, 4)) == (6, "[1d4=4]")


def test_empty_jab_special_expression_falls_back_unhalved(mocker, scripted_random):
    warning = mocker.patch("core.dice_parser.log_warning")
    attacker = Combatant(damage_expr="10", use_jab=True, jab_special_expr="")
    rng = scripted_random(3, 4)
    assert roll_hit_damage(attacker, rng) == (3, "[1d4=3]")
    assert rng.draws == [4]
    warning.assert_called_once()


def test_hit_damage_floored_at_zero(scripted_random):
    attacker = Combatant(damage_expr="1d4", strength_damage=-5)
    assert roll_hit_damage(attacker, scripted_random(1))[0] == 0


def test_shield_damage_uses_shield_expression(scripted_random):
    attacker = Combatant(damage_expr="2d10", shield_damage_expr="1d6p", strength_damage=1)
    assert roll_shield_damage(attacker, scripted_random(6, 2)) == (8, "[1d6p=7]")


def test_shield_damage_falls_back_to_damage_expression(scripted_random):
    attacker = Combatant(damage_expr="1d6")
    assert roll_shield_damage(attacker, scripted_random(5)) == (5, "[1d6=5]")
