"""Player state — the single authoritative economic snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field

from droodle.data.balance import BALANCE
from droodle.data.tiers import ALL_TIERS


@dataclass
class PlayerState:
    """Complete mutable economy state for one player.

    All amounts are integers in tenths of a Droodle. The three generator
    lists are index-aligned: position ``i`` describes tier ``i``.
    """

    # ── Core resources ───────────────────────────────────
    currency: int = 0
    income_rate: int = 0      # added to currency once per accrual tick
    click_strength: int = BALANCE.economy.default_click_strength

    # ── Generators, one entry per tier ───────────────────
    generator_owned: list[int] = field(default_factory=list)
    generator_base_price: list[int] = field(default_factory=list)
    generator_income_value: list[int] = field(default_factory=list)

    @property
    def tier_count(self) -> int:
        return len(self.generator_owned)

    def expected_income_rate(self) -> int:
        """Income implied by the owned generators."""
        return sum(
            owned * value
            for owned, value in zip(self.generator_owned, self.generator_income_value)
        )

    def copy(self) -> PlayerState:
        return PlayerState(
            currency=self.currency,
            income_rate=self.income_rate,
            click_strength=self.click_strength,
            generator_owned=list(self.generator_owned),
            generator_base_price=list(self.generator_base_price),
            generator_income_value=list(self.generator_income_value),
        )


def default_state() -> PlayerState:
    """Fresh player: no currency, no generators, catalogue prices."""
    return PlayerState(
        currency=0,
        income_rate=0,
        click_strength=BALANCE.economy.default_click_strength,
        generator_owned=[0] * len(ALL_TIERS),
        generator_base_price=[tier.base_price for tier in ALL_TIERS],
        generator_income_value=[tier.income_value for tier in ALL_TIERS],
    )
