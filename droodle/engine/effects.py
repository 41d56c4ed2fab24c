"""Coin-pop markers — short-lived, independently fading click effects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from droodle.data.balance import BALANCE
from droodle.engine.timers import IntervalTimer


@dataclass
class EffectMarker:
    """One fading coin."""

    x: float
    y: float
    created_at: float
    opacity: float = 1.0


class EffectManager:
    """Owns the live markers and fades them on a fixed decay timer."""

    def __init__(
        self,
        decay_period: float = BALANCE.timers.decay_period_s,
        opacity_step: float = BALANCE.effects.opacity_step,
        clear_all_after: float = BALANCE.effects.clear_all_after_s,
    ) -> None:
        self._timer = IntervalTimer(decay_period)
        self._opacity_step = opacity_step
        self._clear_all_after = clear_all_after
        self.markers: list[EffectMarker] = []

    @property
    def max_lifetime(self) -> float:
        """Longest a marker can survive by fading alone."""
        steps = round(1.0 / self._opacity_step)
        return min(steps * self._timer.period, self._clear_all_after)

    def spawn(self, positions: Iterable[tuple[float, float]], now: float) -> None:
        for x, y in positions:
            self.markers.append(EffectMarker(x=x, y=y, created_at=now))

    def clear(self) -> None:
        self.markers.clear()

    def tick(self, dt: float, now: float) -> int:
        """Run the decay passes due in ``dt``. Returns how many markers died."""
        before = len(self.markers)
        steps = self._timer.advance(dt)
        for _ in range(steps):
            if not self.markers:
                break
            self._decay_pass()
        self._expire(now)
        return before - len(self.markers)

    def _decay_pass(self) -> None:
        survivors = []
        for marker in list(self.markers):
            # Rounded so twenty 0.05 steps land exactly on zero
            marker.opacity = round(marker.opacity - self._opacity_step, 6)
            if marker.opacity > 0.0:
                survivors.append(marker)
        self.markers = survivors

    def _expire(self, now: float) -> None:
        limit = self._clear_all_after
        self.markers = [m for m in self.markers if now - m.created_at < limit]
