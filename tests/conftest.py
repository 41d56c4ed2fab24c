"""Shared fixtures."""

import pytest


class FixedRng:
    """Stand-in RNG: every draw returns ``draw``; uniform picks the midpoint."""

    def __init__(self, draw: int) -> None:
        self.draw = draw
        self.uniform_calls = 0

    def randrange(self, stop: int) -> int:
        assert 0 <= self.draw < stop
        return self.draw

    def uniform(self, a: float, b: float) -> float:
        self.uniform_calls += 1
        return (a + b) / 2


@pytest.fixture
def fixed_rng():
    """Factory: fixed_rng(0) always rolls a bonus, fixed_rng(1) never does."""
    return FixedRng
