"""HUD widget — Droodles counter, income, and click strength."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget
from textual.reactive import reactive

from droodle.engine.economy import format_amount
from droodle.engine.player_state import PlayerState


class HUD(Widget):
    """Heads-up display showing the core economy numbers."""

    DEFAULT_CSS = """
    HUD {
        width: 100%;
        height: auto;
        padding: 1;
    }
    """

    droodles: reactive[str] = reactive("0.0")
    dps: reactive[str] = reactive("0.0")
    per_click: reactive[str] = reactive("1.0")
    generators: reactive[int] = reactive(0)

    def render(self) -> Text:
        text = Text()

        text.append("  Droodles: ", style="dim")
        text.append(f"{self.droodles}\n", style="bold green")

        text.append("  DPS: ", style="dim")
        text.append(f"{self.dps}\n", style="green")

        text.append("  Per Click: ", style="dim")
        text.append(f"{self.per_click}\n", style="green")

        text.append("  Generators: ", style="dim")
        text.append(f"{self.generators}\n", style="bold cyan")

        text.append("\n")
        text.append("  [Space] Click  [1-4] Buy  [Q] Quit\n", style="dim italic")
        return text

    def update_from_state(self, state: PlayerState) -> None:
        """Sync HUD with player state."""
        self.droodles = format_amount(state.currency)
        self.dps = format_amount(state.income_rate)
        self.per_click = format_amount(state.click_strength)
        self.generators = sum(state.generator_owned)
