"""Click resolution — ordinary clicks, the rare bonus click, and coin spawns."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto

from droodle.data.balance import BALANCE
from droodle.engine.economy import SoundCue
from droodle.engine.player_state import PlayerState

logger = logging.getLogger(__name__)


class ClickKind(Enum):
    """Which reward rule a click resolved to."""

    NORMAL = auto()
    BONUS = auto()


@dataclass(frozen=True)
class ClickRegion:
    """Axis-aligned clickable rectangle; bounds are inclusive."""

    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    @property
    def center(self) -> tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)


CLICK_REGION = ClickRegion(
    left=BALANCE.click_region.left,
    top=BALANCE.click_region.top,
    right=BALANCE.click_region.right,
    bottom=BALANCE.click_region.bottom,
)


@dataclass(frozen=True)
class ClickOutcome:
    """Result of one resolved click."""

    kind: ClickKind
    reward: int
    # Where coin markers should pop up
    markers: list[tuple[float, float]] = field(default_factory=list)

    @property
    def sound(self) -> SoundCue:
        return SoundCue.BONUS if self.kind is ClickKind.BONUS else SoundCue.CLICK


def bonus_reward(state: PlayerState) -> int:
    """Jackpot: click strength times income, never below the floor."""
    return max(state.click_strength * state.income_rate, BALANCE.economy.bonus_floor)


def _bonus_markers(rng) -> list[tuple[float, float]]:
    x0, x1, y0, y1 = BALANCE.effects.coin_area
    return [
        (rng.uniform(x0, x1), rng.uniform(y0, y1))
        for _ in range(BALANCE.effects.bonus_burst)
    ]


def _click_marker(rng, point: tuple[float, float]) -> tuple[float, float]:
    jitter = BALANCE.effects.click_jitter
    x, y = point
    return (x + rng.uniform(-jitter, jitter), y + rng.uniform(-jitter, jitter))


def resolve_click(
    state: PlayerState,
    rng=None,
    point: tuple[float, float] | None = None,
    region: ClickRegion = CLICK_REGION,
) -> ClickOutcome:
    """Resolve one in-region click and credit the reward.

    Args:
        state: Player state to credit.
        rng: Anything with ``randrange`` and ``uniform``; defaults to the
            ``random`` module. Pass a seeded ``random.Random`` for tests.
        point: Cursor position of the click, used to place the coin.
            Defaults to the region centre.
        region: Clickable region the click landed in.

    Returns:
        The outcome, including the reward already added to ``state``.
    """
    if rng is None:
        rng = random

    if rng.randrange(BALANCE.economy.bonus_odds) == 0:
        reward = bonus_reward(state)
        state.currency += reward
        logger.debug("Bonus click for %d", reward)
        return ClickOutcome(ClickKind.BONUS, reward, _bonus_markers(rng))

    reward = state.click_strength
    state.currency += reward
    origin = point if point is not None else region.center
    return ClickOutcome(ClickKind.NORMAL, reward, [_click_marker(rng, origin)])
