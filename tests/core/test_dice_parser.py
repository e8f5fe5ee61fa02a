"""
Tests for the damage expression evaluator.
"""

import random

import pytest
from core.dice_parser import (
    clean_damage_expr,
    evaluate,
    expected_value,
    penetrating_roll,
    penetrating_roll_with,
    roll_damage_expr,
    roll_damage_expr_nonpenetrating,
    roll_expression,
    split_terms,
    standard_roll,
    strip_outer_parens,
)


@pytest.fixture
def parser_warnings(mocker):
    """Captures the warnings reported by the dice parser."""
    return mocker.patch("core.dice_parser.log_warning")


# ---- Single dice ----


def test_standard_roll_draws_in_range(scripted_random):
    rng = scripted_random(4)
    assert standard_roll(6, rng) == 4
    assert rng.calls == [(1, 6)]


@pytest.mark.parametrize("sides, expected", [(1, 1), (0, 0), (-3, 0)])
def test_degenerate_dice_do_not_draw(scripted_random, sides, expected):
    """Test that dice with one face or less return a fixed value."""
    rng = scripted_random(5)
    assert standard_roll(sides, rng) == expected
    assert penetrating_roll(sides, rng) == expected
    assert rng.calls == []


def test_penetrating_roll_without_maximum_is_face_value(scripted_random):
    assert penetrating_roll(20, scripted_random(13)) == 13


@pytest.mark.parametrize(
    "sides, draws, expected",
    [
        (6, [6, 2], 7),
        (6, [6, 6, 2], 12),
        (20, [20, 20, 20, 5], 62),
        (4, [4, 4, 4, 4, 1], 13),
    ],
)
def test_penetrating_roll_explodes(scripted_random, sides, draws, expected):
    """Test k maximum draws followed by v: sides + (sides-1)(k-1) + (v-1)."""
    rng = scripted_random(*draws)
    assert penetrating_roll(sides, rng) == expected
    assert rng.draws == []


def test_penetrating_roll_with_custom_draws():
    draws = iter([8, 8, 3])
    assert penetrating_roll_with(8, lambda: next(draws)) == 8 + 7 + 2


# ---- Cleaning ----


@pytest.mark.parametrize(
    "raw, cleaned",
    [
        ("2D6P", "2d6p"),
        ("2d8p + 3", "2d8p+3"),
        ("d8p and 1d4 vs large", "d8p"),
        ("lower of 2d4p", "2d4p"),
        ("1d6p^vs large only", "1d6p"),
        ("(d4p-2)+(d4p-2)", "(d4p-2)+(d4p-2)"),
    ],
)
def test_clean_damage_expr(raw, cleaned):
    assert clean_damage_expr(raw) == cleaned


@pytest.mark.parametrize("raw", ["", "!!!", "^only"])
def test_clean_damage_expr_falls_back_to_default(parser_warnings, raw):
    """Test that an expression with nothing usable becomes a single d4p."""
    assert clean_damage_expr(raw) == "d4p"
    parser_warnings.assert_called_once()


def test_clean_damage_expr_truncates_long_input(parser_warnings):
    assert len(clean_damage_expr("1+" * 200 + "1")) == 256
    parser_warnings.assert_called_once()


# ---- Structure ----


def test_strip_outer_parens():
    assert strip_outer_parens("((2d6))") == "2d6"
    assert strip_outer_parens("(d4)+(d4)") == "(d4)+(d4)"


def test_split_terms_keeps_signs_and_groups():
    assert list(split_terms("-2d6+(d4-1)-3")) == [
        (-1, "2d6"),
        (1, "(d4-1)"),
        (-1, "3"),
    ]


# ---- Evaluation ----


def test_evaluate_dice_and_constant(scripted_random):
    total, trace = evaluate("2d6p+3", scripted_random(6, 2, 4))
    assert total == 7 + 4 + 3
    assert trace == "2d6p=7+4 + 3"


def test_evaluate_is_case_insensitive(scripted_random):
    assert evaluate("2D6P", scripted_random(3, 5)) == evaluate("2d6p", scripted_random(3, 5))


def test_evaluate_count_defaults_to_one(scripted_random):
    assert evaluate("d8", scripted_random(5)) == (5, "1d8=5")


def test_evaluate_nested_parentheses(scripted_random):
    total, trace = evaluate("(d4p-2)+(d4p-2)", scripted_random(3, 1))
    assert total == 0
    assert trace == "(1d4p=3 - 2) + (1d4p=1 - 2)"


def test_evaluate_leading_minus(scripted_random):
    total, trace = evaluate("-2+d6", scripted_random(6))
    assert total == 4
    assert trace == "-2 + 1d6=6"


def test_evaluate_only_first_alternative(scripted_random):
    rng = scripted_random(2, 2)
    assert evaluate("1d4 and 1d6", rng) == (2, "1d4=2")
    assert rng.calls == [(1, 4)]


def test_evaluate_invalid_number_counts_as_zero(parser_warnings):
    assert evaluate("x+2", random.Random(0))[0] == 2
    parser_warnings.assert_called_once()


def test_evaluate_missing_sides_counts_as_zero(parser_warnings, scripted_random):
    rng = scripted_random(3)
    assert evaluate("2d", rng)[0] == 0
    assert rng.calls == []
    parser_warnings.assert_called_once()


def test_evaluate_skips_stray_closing_parenthesis(parser_warnings):
    """Test that an unmatched ')' is skipped instead of stalling the parser."""
    assert evaluate("3)+2", random.Random(0))[0] == 5
    parser_warnings.assert_called_once()


def test_evaluate_clamps_dice_count(parser_warnings):
    assert evaluate("200d1", random.Random(0))[0] == 100
    parser_warnings.assert_called_once()


def test_evaluate_clamps_dice_sides(parser_warnings, scripted_random):
    rng = scripted_random(999)
    assert evaluate("d5000", rng)[0] == 999
    assert rng.calls == [(1, 1000)]
    parser_warnings.assert_called_once()


def test_evaluate_limits_nesting_depth(parser_warnings):
    """Test that terms nested too deeply count as zero."""
    expr = "1"
    for _ in range(40):
        expr = f"1+({expr})"
    total, _ = evaluate(expr, random.Random(0))
    assert total == 33
    assert parser_warnings.called


def test_evaluate_is_deterministic_for_a_seed():
    first = evaluate("3d10p+2d6-1", random.Random(42))
    second = evaluate("3d10p+2d6-1", random.Random(42))
    assert first == second


# ---- Public wrappers ----


def test_roll_damage_expr_brackets_trace(scripted_random):
    assert roll_damage_expr("1d8p", scripted_random(8, 4)) == (11, "[1d8p=11]")


def test_roll_damage_expr_nonpenetrating_never_explodes(scripted_random):
    rng = scripted_random(6, 6, 6)
    assert roll_damage_expr_nonpenetrating("2d6p", rng) == (12, "[2d6=6+6]")
    assert rng.draws == [6]


def test_roll_expression_returns_total(scripted_random):
    assert roll_expression("d10+5", scripted_random(7)) == 12


# ---- Statistics ----


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("2d6+3", 10.0),
        ("d6p", 4.0),
        ("2d8p", 10.0),
        ("(d4p-2)+(d4p-2)", 2.0),
        ("5", 5.0),
        ("d1", 1.0),
    ],
)
def test_expected_value(expr, expected):
    assert expected_value(expr) == pytest.approx(expected)
