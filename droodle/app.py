"""Droodle Clicker — Main Textual Application.

Wires the simulation to the terminal: mouse clicks and key presses become
events, a fixed-rate timer steps the simulation, and the widgets read the
state back.
"""

from __future__ import annotations

import time

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header
from textual.timer import Timer

from droodle.data.balance import BALANCE
from droodle.engine.economy import SoundCue, format_amount
from droodle.engine.save import PersistenceGateway
from droodle.engine.simulation import Simulation, StepReport
from droodle.ui.click_target import ClickTarget
from droodle.ui.hud import HUD
from droodle.ui.shop_panel import ShopPanel, TierButton


class ClickerApp(App):
    """The Droodle Clicker TUI."""

    TITLE = "Droodle Clicker"
    SUB_TITLE = "Click the face. Buy things. Get Droodles."

    CSS = """
    #left-panel {
        width: 3fr;
    }
    #right-panel {
        width: 2fr;
    }
    """

    BINDINGS = [
        Binding("space", "click_face", "Click", show=True, priority=True),
        Binding("1", "buy_tier(0)", "Buy #1", show=False),
        Binding("2", "buy_tier(1)", "Buy #2", show=False),
        Binding("3", "buy_tier(2)", "Buy #3", show=False),
        Binding("4", "buy_tier(3)", "Buy #4", show=False),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, gateway: PersistenceGateway, simulation: Simulation | None = None) -> None:
        super().__init__()
        self._sim: Simulation = simulation if simulation is not None else Simulation.start(gateway)
        self._last_tick: float = time.monotonic()
        self._tick_timer: Timer | None = None

    @property
    def simulation(self) -> Simulation:
        return self._sim

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="game-container"):
            with Vertical(id="left-panel"):
                yield HUD(id="hud-panel")
                yield ClickTarget(self._sim.region, id="click-target")
            with Vertical(id="right-panel"):
                yield ShopPanel(self._sim.state.tier_count, id="shop-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Start the game loop timer."""
        interval = 1.0 / BALANCE.tick_rate_hz
        self._last_tick = time.monotonic()
        self._tick_timer = self.set_interval(interval, self._game_tick)
        self._sync_ui()

    def _game_tick(self) -> None:
        """Main game loop — called BALANCE.tick_rate_hz times per second."""
        now = time.monotonic()
        dt = now - self._last_tick
        self._last_tick = now

        report = self._sim.step(dt)
        self._play_cues(report)
        self._sync_ui()

    def _play_cues(self, report: StepReport) -> None:
        """Terminal stand-in for the audio layer."""
        for outcome in report.clicks:
            if outcome.sound is SoundCue.BONUS:
                self.bell()
                self.notify(
                    f"TOASTY! +{format_amount(outcome.reward)} Droodles",
                    severity="warning", timeout=2,
                )

    def _sync_ui(self) -> None:
        """Push state to all widgets."""
        state = self._sim.state
        self.query_one("#hud-panel", HUD).update_from_state(state)
        self.query_one("#shop-panel", ShopPanel).update_from_state(state)
        self.query_one("#click-target", ClickTarget).update_markers(self._sim.effects.markers)

    # ── Input ────────────────────────────────────────

    def on_click_target_clicked(self, message: ClickTarget.Clicked) -> None:
        self._sim.push_click(message.x, message.y)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, TierButton):
            self._sim.push_purchase(event.button.tier_index)

    # ── Actions ──────────────────────────────────────

    def action_click_face(self) -> None:
        """Keyboard click lands in the middle of the face."""
        x, y = self._sim.region.center
        self._sim.push_click(x, y)

    def action_buy_tier(self, tier_index: int) -> None:
        self._sim.push_purchase(tier_index)

    async def action_quit(self) -> None:
        """Final save, then quit (also reached by the default quit keys)."""
        self._sim.shutdown()
        self.exit()
