"""
Shared fixtures for the simulator tests.
"""

import pytest


class ScriptedRandom:
    """A random source replaying a fixed list of draws.

    Each draw is clamped to the requested [a, b] interval. Once the script is
    exhausted every call returns the lowest possible value.
    """

    def __init__(self, draws):
        self.draws = list(draws)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self.draws:
            return a
        return min(max(self.draws.pop(0), a), b)


@pytest.fixture
def scripted_random():
    """Factory building a ScriptedRandom from the given draws."""

    def _make(*draws: int) -> ScriptedRandom:
        return ScriptedRandom(draws)

    return _make
