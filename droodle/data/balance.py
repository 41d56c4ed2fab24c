"""Balance constants — all tuning knobs in one place.

All currency-like values are integers in tenths of a Droodle.
Generator prices follow: floor(base / 10 * (growth_num / growth_den) ^ owned) * 10
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for clicks, prices, and number display."""

    # Currency per ordinary click (tenths)
    default_click_strength: int = 10

    # Price growth per unit owned, as an exact ratio (23/20 = 1.15)
    price_growth_num: int = 23
    price_growth_den: int = 20

    # Bonus click: one draw in [0, bonus_odds) equal to zero triggers it
    bonus_odds: int = 50
    # Bonus reward never drops below this (tenths) — 100 Droodles
    bonus_floor: int = 1000

    # Raw values at or above this are shown in scientific notation
    scientific_threshold: int = 1_000_000_000
    scientific_digits: int = 6
    # Buy buttons use a shorter mantissa
    price_scientific_digits: int = 3


@dataclass(frozen=True)
class TimerBalance:
    """Periods (seconds) of the repeating timers."""

    accrual_period_s: float = 1.0
    save_period_s: float = 1.0
    # Coin fade step interval: 40 ms
    decay_period_s: float = 0.04


@dataclass(frozen=True)
class EffectBalance:
    """Tuning for the coin-pop markers spawned on clicks."""

    # Opacity removed per decay step (20 steps → 0.8 s lifetime)
    opacity_step: float = 0.05
    # Any marker older than this is cleared regardless of opacity
    clear_all_after_s: float = 1.0
    # Coins spawned by a bonus click
    bonus_burst: int = 8
    # Normal-click coin lands within ±jitter of the cursor
    click_jitter: float = 16.0
    # Area inside the click region where bonus coins land: (x0, x1, y0, y1)
    coin_area: tuple[float, float, float, float] = (164.0, 434.0, 216.0, 494.0)


@dataclass(frozen=True)
class ClickRegionBalance:
    """The clickable face, in screen coordinates (inclusive bounds)."""

    left: float = 100.0
    top: float = 150.0
    right: float = 500.0
    bottom: float = 550.0


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    timers: TimerBalance = field(default_factory=TimerBalance)
    effects: EffectBalance = field(default_factory=EffectBalance)
    click_region: ClickRegionBalance = field(default_factory=ClickRegionBalance)

    # Host loop ticks per second
    tick_rate_hz: float = 30.0


# Singleton — import this everywhere
BALANCE = GameBalance()
