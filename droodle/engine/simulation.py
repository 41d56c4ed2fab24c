"""Simulation — owns the player state and runs every system once per step."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from droodle.engine.clicks import CLICK_REGION, ClickOutcome, ClickRegion, resolve_click
from droodle.engine.economy import PurchaseResult, SoundCue, attempt_purchase
from droodle.engine.effects import EffectManager
from droodle.engine.player_state import PlayerState
from droodle.engine.save import PersistenceGateway
from droodle.engine.timers import AccrualScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClickEvent:
    """Pointer click at screen coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class PurchaseEvent:
    """A tier's buy button was activated."""

    tier_index: int


@dataclass
class StepReport:
    """Everything that happened during one step, for the presentation layer."""

    clicks: list[ClickOutcome] = field(default_factory=list)
    purchases: list[PurchaseResult] = field(default_factory=list)
    sounds: list[SoundCue] = field(default_factory=list)
    accrual_ticks: int = 0
    saved: bool = False


class Simulation:
    """Single-threaded game step over one explicitly owned PlayerState."""

    def __init__(
        self,
        state: PlayerState,
        gateway: PersistenceGateway | None = None,
        rng=None,
        region: ClickRegion = CLICK_REGION,
    ) -> None:
        self.state = state
        self.gateway = gateway
        self.rng = rng
        self.region = region
        self.accrual = AccrualScheduler()
        self.effects = EffectManager()
        self.clock: float = 0.0
        self._events: deque[ClickEvent | PurchaseEvent] = deque()

    @classmethod
    def start(cls, gateway: PersistenceGateway, rng=None) -> Simulation:
        """Build a simulation from the saved player (or fresh defaults)."""
        return cls(gateway.load_or_init(), gateway=gateway, rng=rng)

    # ── Input ────────────────────────────────────────

    def push_click(self, x: float, y: float) -> None:
        self._events.append(ClickEvent(x, y))

    def push_purchase(self, tier_index: int) -> None:
        self._events.append(PurchaseEvent(tier_index))

    @property
    def pending_events(self) -> int:
        return len(self._events)

    # ── Step ─────────────────────────────────────────

    def step(self, dt: float) -> StepReport:
        """Drain queued input, then advance every timer by ``dt`` seconds."""
        dt = max(dt, 0.0)
        self.clock += dt
        report = StepReport()

        while self._events:
            event = self._events.popleft()
            if isinstance(event, ClickEvent):
                self._handle_click(event, report)
            else:
                result = attempt_purchase(self.state, event.tier_index)
                report.purchases.append(result)
                if result.sound is not None:
                    report.sounds.append(result.sound)

        report.accrual_ticks = self.accrual.advance(self.state, dt)
        self.effects.tick(dt, self.clock)
        if self.gateway is not None:
            report.saved = self.gateway.tick(self.state, dt)
        return report

    def _handle_click(self, event: ClickEvent, report: StepReport) -> None:
        if not self.region.contains(event.x, event.y):
            return
        outcome = resolve_click(self.state, self.rng, (event.x, event.y), self.region)
        self.effects.spawn(outcome.markers, self.clock)
        report.clicks.append(outcome)
        report.sounds.append(outcome.sound)

    # ── Persistence ──────────────────────────────────

    def save(self) -> bool:
        """Save right now, outside the timer. Returns True if written."""
        if self.gateway is None:
            return False
        return self.gateway.save(self.state)

    def shutdown(self) -> bool:
        """Final best-effort save. Returns True if it was written."""
        if self.gateway is None:
            return False
        saved = self.save()
        logger.info("Shutdown save %s", "written" if saved else "failed")
        return saved
