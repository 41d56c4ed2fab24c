"""Shop panel — one buy button per generator tier."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Static

from droodle.data.balance import BALANCE
from droodle.data.tiers import ALL_TIERS, tier_name
from droodle.engine.economy import can_afford, format_amount, get_tier_price
from droodle.engine.player_state import PlayerState


class TierButton(Button):
    """Buy button that knows which tier it buys."""

    def __init__(self, tier_index: int, **kwargs) -> None:
        super().__init__(tier_name(tier_index), **kwargs)
        self.tier_index = tier_index


def tier_label(state: PlayerState, tier_index: int) -> Text:
    """Button text: name, price, and owned count."""
    price = get_tier_price(state, tier_index)
    text = Text()
    text.append(f"[{tier_index + 1}] {tier_name(tier_index)} $", style="bold")
    text.append(format_amount(price, BALANCE.economy.price_scientific_digits))
    text.append(f"\nOwned: {state.generator_owned[tier_index]}", style="dim")
    return text


class ShopPanel(Vertical):
    """Column of tier buttons with live prices."""

    DEFAULT_CSS = """
    ShopPanel {
        width: 100%;
        height: auto;
        padding: 0 1;
    }
    ShopPanel TierButton {
        width: 100%;
        height: 4;
        margin-bottom: 1;
    }
    """

    def __init__(self, tier_count: int = len(ALL_TIERS), **kwargs) -> None:
        super().__init__(**kwargs)
        self._tier_count = tier_count

    def compose(self) -> ComposeResult:
        yield Static(Text("  ═══ Shop ═══", style="bold magenta"))
        for i in range(self._tier_count):
            yield TierButton(i, id=f"tier-{i}")

    def update_from_state(self, state: PlayerState) -> None:
        """Refresh labels and highlight what the player can afford."""
        for button in self.query(TierButton):
            i = button.tier_index
            button.label = tier_label(state, i)
            button.variant = "success" if can_afford(state, i) else "default"
