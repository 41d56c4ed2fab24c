"""Interval timers and passive income accrual."""

from __future__ import annotations

from droodle.data.balance import BALANCE
from droodle.engine.player_state import PlayerState

_EPSILON = 1e-9


class IntervalTimer:
    """Repeating timer driven by host-measured elapsed time.

    Leftover time after the last completed interval carries over to the
    next ``advance`` call, so intervals are never dropped or merged no
    matter how the host batches its deltas.
    """

    def __init__(self, period: float) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self.period = period
        self.elapsed: float = 0.0

    def advance(self, dt: float) -> int:
        """Add ``dt`` seconds. Returns how many intervals completed."""
        if dt <= 0:
            return 0
        self.elapsed += dt
        # Tolerate float residue so ten 0.1 s frames complete one second
        fired = int((self.elapsed + _EPSILON) // self.period)
        if fired:
            self.elapsed = max(0.0, self.elapsed - fired * self.period)
        return fired

    def reset(self) -> None:
        self.elapsed = 0.0


class AccrualScheduler:
    """Adds passive income to the balance once per completed second."""

    def __init__(self, period: float = BALANCE.timers.accrual_period_s) -> None:
        self.timer = IntervalTimer(period)

    def advance(self, state: PlayerState, dt: float) -> int:
        """Credit one accrual per completed interval. Returns the tick count."""
        ticks = self.timer.advance(dt)
        if ticks:
            state.currency += state.income_rate * ticks
        return ticks
