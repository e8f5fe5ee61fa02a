"""
Dice parser module for the simulator.

Provides a safe, recursive-descent evaluator for damage expressions such as
"2d6p+3", "(d4p-2)+(d4p-2)" or "d8p and 1d4 vs large^ only first". No eval()
is used and malformed input never aborts an evaluation: bad numbers count as
zero and an expression with nothing usable in it falls back to a single
penetrating d4.

Every function that rolls dice takes the random source explicitly, so the
same sequence of draws always produces the same results.
"""

from collections.abc import Callable, Iterator
from typing import Protocol

from catchery import log_warning

from .constants import DEFAULT_DAMAGE_EXPR

# Limits on expressions read from catalog data.
MAX_EXPRESSION_LENGTH = 256
MAX_NESTING_DEPTH = 32
MAX_DICE_COUNT = 100
MAX_DICE_SIDES = 1000
MAX_PENETRATIONS = 100

ALTERNATIVE_SEPARATOR = " and "
LOWER_OF_PREFIX = "lower of"
RESTRICTION_MARKER = "^"


class RandomSource(Protocol):
    """Anything able to draw a uniform integer in [a, b], like random.Random."""

    def randint(self, a: int, b: int) -> int: ...


# ---- Single dice ----


def standard_roll(sides: int, rng: RandomSource) -> int:
    """
    Rolls a single standard die.

    Args:
        sides (int): Number of faces, dice with one face or less are fixed.
        rng (RandomSource): The random source to draw from.

    Returns:
        int: A value in [1, sides], or max(sides, 0) for degenerate dice.

    """
    if sides <= 1:
        return max(sides, 0)
    return rng.randint(1, sides)


def penetrating_roll_with(sides: int, next_roll: Callable[[], int]) -> int:
    """
    Rolls a single penetrating (exploding) die using the given draw function.

    The first draw counts in full. Every time a draw shows the maximum face
    the die is rolled again and the new draw adds (roll - 1), until a draw
    below the maximum ends the chain.

    Args:
        sides (int): Number of faces of the die.
        next_roll (Callable[[], int]): Returns the next raw draw.

    Returns:
        int: The accumulated total.

    """
    if sides <= 1:
        return max(sides, 0)
    roll = min(max(next_roll(), 1), sides)
    total = roll
    penetrations = 0
    while roll == sides and penetrations < MAX_PENETRATIONS:
        roll = min(max(next_roll(), 1), sides)
        total += roll - 1
        penetrations += 1
    return total


def penetrating_roll(sides: int, rng: RandomSource) -> int:
    """
    Rolls a single penetrating die.

    Args:
        sides (int): Number of faces of the die.
        rng (RandomSource): The random source to draw from.

    Returns:
        int: The accumulated total of the exploding chain.

    """
    if sides <= 1:
        return max(sides, 0)
    return penetrating_roll_with(sides, lambda: rng.randint(1, sides))


# ---- Expression cleaning ----


def clean_damage_expr(expr: str) -> str:
    """
    Reduces a catalog damage string to the evaluable expression.

    Keeps only the first alternative damage line, skips a leading
    "lower of" phrase, drops everything from the restriction marker on and
    keeps alphanumerics and "+-()" only.

    Args:
        expr (str): The raw damage string.

    Returns:
        str: The lower-case expression, or the default expression if nothing
        usable is left.

    """
    first = (expr or "").split(ALTERNATIVE_SEPARATOR, 1)[0]
    position = first.lower().find(LOWER_OF_PREFIX)
    if position >= 0:
        first = first[position + len(LOWER_OF_PREFIX) :]
    first = first.split(RESTRICTION_MARKER, 1)[0]
    cleaned = "".join(
        ch for ch in first if (ch.isascii() and ch.isalnum()) or ch in "+-()"
    ).lower()
    if len(cleaned) > MAX_EXPRESSION_LENGTH:
        log_warning(
            f"Damage expression too long, truncated to {MAX_EXPRESSION_LENGTH} characters",
            {"expression": expr, "length": len(cleaned)},
        )
        cleaned = cleaned[:MAX_EXPRESSION_LENGTH]
    if not cleaned:
        log_warning(
            f"Unusable damage expression, falling back to '{DEFAULT_DAMAGE_EXPR}'",
            {"expression": expr},
        )
        return DEFAULT_DAMAGE_EXPR
    return cleaned


# ---- Expression structure ----


def strip_outer_parens(text: str) -> str:
    """
    Removes parentheses that wrap the whole text, repeatedly.

    "((2d6))" becomes "2d6", while "(d4)+(d4)" is left untouched.
    """
    while len(text) >= 2 and text[0] == "(" and text[-1] == ")":
        depth = 0
        for index, ch in enumerate(text):
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0 and index != len(text) - 1:
                    return text
        if depth != 0:
            return text
        text = text[1:-1]
    return text


def has_top_level_operator(text: str) -> bool:
    """Returns True if a '+' or '-' appears outside any parentheses."""
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch in "+-" and depth == 0:
            return True
    return False


def split_terms(expr: str) -> Iterator[tuple[int, str]]:
    """
    Splits an expression into signed top-level terms.

    Args:
        expr (str): A cleaned expression.

    Yields:
        tuple[int, str]: The sign (1 or -1) and the text of each non-empty term.

    """
    index = 0
    length = len(expr)
    while index < length:
        sign = 1
        if expr[index] == "+":
            index += 1
        elif expr[index] == "-":
            sign = -1
            index += 1

        start = index
        depth = 0
        while index < length:
            ch = expr[index]
            if ch == "(":
                depth += 1
            elif ch == ")":
                if depth == 0:
                    break
                depth -= 1
            elif ch in "+-" and depth == 0:
                break
            index += 1

        term = expr[start:index]
        if index < length and expr[index] == ")":
            log_warning(
                "Unmatched closing parenthesis ignored",
                {"expression": expr, "position": index},
            )
            index += 1
        if term:
            yield sign, term


def _parse_int(token: str, default: int, what: str) -> int:
    """Parses an integer token, reporting and defaulting on failure."""
    try:
        return int(token)
    except ValueError:
        log_warning(
            f"Invalid {what} '{token}', using {default}",
            {"token": token, "default": default},
        )
        return default


def _parse_dice_group(term: str, d_pos: int) -> tuple[int, int, bool]:
    """Extracts (count, sides, penetrating) from a die group term."""
    count_str = term[:d_pos]
    count = _parse_int(count_str, 1, "dice count") if count_str else 1
    if count > MAX_DICE_COUNT:
        log_warning(
            f"Too many dice: {count} (limit: {MAX_DICE_COUNT})",
            {"term": term, "count": count},
        )
        count = MAX_DICE_COUNT

    after_d = term[d_pos + 1 :]
    digits = 0
    while digits < len(after_d) and after_d[digits].isdigit():
        digits += 1
    sides_str, rest = after_d[:digits], after_d[digits:]
    if sides_str:
        sides = int(sides_str)
    else:
        log_warning("Missing dice sides, die counts as zero", {"term": term})
        sides = 0
    if sides > MAX_DICE_SIDES:
        log_warning(
            f"Too many sides: {sides} (limit: {MAX_DICE_SIDES})",
            {"term": term, "sides": sides},
        )
        sides = MAX_DICE_SIDES
    return count, sides, rest.startswith("p")


# ---- Evaluation ----


def evaluate_term(term: str, rng: RandomSource, depth: int = 0) -> tuple[int, str]:
    """
    Evaluates a single term: a constant, a die group or a sub-expression.

    Args:
        term (str): The term text.
        rng (RandomSource): The random source to draw from.
        depth (int): Current nesting depth.

    Returns:
        tuple[int, str]: The value of the term and its trace.

    """
    if depth > MAX_NESTING_DEPTH:
        log_warning(
            f"Expression nested deeper than {MAX_NESTING_DEPTH}, term counts as zero",
            {"term": term},
        )
        return 0, "0"

    trimmed = strip_outer_parens(term)
    if has_top_level_operator(trimmed):
        total, trace = evaluate_expression(trimmed, rng, depth + 1)
        return total, f"({trace})"

    d_pos = trimmed.find("d")
    if d_pos < 0:
        value = _parse_int(trimmed, 0, "number")
        return value, str(value)

    count, sides, penetrating = _parse_dice_group(trimmed, d_pos)
    roll = penetrating_roll if penetrating else standard_roll
    rolls = [roll(sides, rng) for _ in range(count)]
    suffix = "p" if penetrating else ""
    trace = f"{count}d{sides}{suffix}=" + "+".join(str(value) for value in rolls)
    return sum(rolls), trace


def evaluate_expression(
    expr: str, rng: RandomSource, depth: int = 0
) -> tuple[int, str]:
    """
    Evaluates an already cleaned expression.

    Args:
        expr (str): The cleaned expression.
        rng (RandomSource): The random source to draw from.
        depth (int): Current nesting depth.

    Returns:
        tuple[int, str]: The total and a trace of every term.

    """
    total = 0
    trace = ""
    for sign, term in split_terms(expr):
        value, detail = evaluate_term(term, rng, depth)
        total += sign * value
        if trace:
            trace += f" {'-' if sign < 0 else '+'} {detail}"
        elif sign < 0:
            trace = f"-{detail}"
        else:
            trace = detail
    return total, trace


def evaluate(expression: str, rng: RandomSource) -> tuple[int, str]:
    """
    Cleans and evaluates a damage expression.

    Args:
        expression (str): The raw damage expression.
        rng (RandomSource): The random source to draw from.

    Returns:
        tuple[int, str]: The total and a trace of the individual draws.

    """
    return evaluate_expression(clean_damage_expr(expression), rng)


def roll_damage_expr(expr: str, rng: RandomSource) -> tuple[int, str]:
    """
    Rolls a damage expression, honoring penetrating dice.

    Returns:
        tuple[int, str]: The total and the bracketed trace, e.g. "[1d8p=8+3]".

    """
    total, trace = evaluate(expr, rng)
    return total, f"[{trace}]"


def roll_damage_expr_nonpenetrating(expr: str, rng: RandomSource) -> tuple[int, str]:
    """
    Rolls a damage expression with every penetrating die downgraded.

    Returns:
        tuple[int, str]: The total and the bracketed trace.

    """
    cleaned = clean_damage_expr(expr).replace("p", "")
    total, trace = evaluate_expression(cleaned, rng)
    return total, f"[{trace}]"


def roll_expression(expr: str, rng: RandomSource) -> int:
    """Rolls a damage expression and returns only the total."""
    total, _ = evaluate(expr, rng)
    return total


# ---- Statistics ----


def _expected_term(term: str, depth: int) -> float:
    """Returns the mean value of a single term."""
    if depth > MAX_NESTING_DEPTH:
        return 0.0
    trimmed = strip_outer_parens(term)
    if has_top_level_operator(trimmed):
        return _expected_expression(trimmed, depth + 1)
    d_pos = trimmed.find("d")
    if d_pos < 0:
        return float(_parse_int(trimmed, 0, "number"))
    count, sides, penetrating = _parse_dice_group(trimmed, d_pos)
    if sides <= 1:
        return float(count * max(sides, 0))
    # A penetrating die adds (s - 1) / 2 on average per explosion, which
    # sums to exactly one extra half point over the plain die.
    single = (sides + 2) / 2 if penetrating else (sides + 1) / 2
    return count * single


def _expected_expression(expr: str, depth: int) -> float:
    return sum(sign * _expected_term(term, depth) for sign, term in split_terms(expr))


def expected_value(expr: str) -> float:
    """
    Computes the mean of a damage expression without rolling.

    Args:
        expr (str): The raw damage expression.

    Returns:
        float: The expected total.

    """
    return _expected_expression(clean_damage_expr(expr), 0)
