"""Economy engine — generator pricing, purchases, and number formatting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto

from droodle.data.balance import BALANCE
from droodle.engine.player_state import PlayerState

logger = logging.getLogger(__name__)


class SoundCue(Enum):
    """Sound effects the audio layer plays for core outcomes."""

    CLICK = auto()
    BONUS = auto()
    PURCHASE = auto()


class PurchaseStatus(Enum):
    """How a purchase attempt ended."""

    APPLIED = auto()
    INSUFFICIENT_FUNDS = auto()
    INVALID_TIER = auto()


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a single purchase attempt."""

    status: PurchaseStatus
    tier_index: int
    # Price of the *next* unit of this tier (after an applied purchase,
    # or the unaffordable price on rejection); None for invalid tiers
    next_price: int | None = None

    @property
    def applied(self) -> bool:
        return self.status is PurchaseStatus.APPLIED

    @property
    def sound(self) -> SoundCue | None:
        return SoundCue.PURCHASE if self.applied else None


def calculate_price(base: int, owned: int) -> int:
    """Price of the next generator: floor(base / 10 * 1.15 ^ owned) * 10.

    Evaluated exactly with integers so huge owned counts neither overflow
    nor drift.
    """
    if base < 0 or owned < 0:
        raise ValueError(f"base and owned must be non-negative, got {base}, {owned}")
    bal = BALANCE.economy
    num = base * bal.price_growth_num ** owned
    den = 10 * bal.price_growth_den ** owned
    return (num // den) * 10


def _valid_tier(state: PlayerState, tier_index: object) -> bool:
    return (
        isinstance(tier_index, int)
        and not isinstance(tier_index, bool)
        and 0 <= tier_index < state.tier_count
    )


def get_tier_price(state: PlayerState, tier_index: int) -> int:
    """Current price of one more unit of a tier."""
    return calculate_price(
        state.generator_base_price[tier_index],
        state.generator_owned[tier_index],
    )


def can_afford(state: PlayerState, tier_index: int) -> bool:
    """Check if the player can afford the next unit of a tier."""
    if not _valid_tier(state, tier_index):
        return False
    return state.currency >= get_tier_price(state, tier_index)


def attempt_purchase(state: PlayerState, tier_index: int) -> PurchaseResult:
    """Attempt to buy one generator of a tier.

    Either every field changes together or nothing does.
    """
    if not _valid_tier(state, tier_index):
        logger.warning("Rejected purchase for unknown tier index %r", tier_index)
        return PurchaseResult(PurchaseStatus.INVALID_TIER, tier_index)

    cost = get_tier_price(state, tier_index)
    if state.currency < cost:
        return PurchaseResult(PurchaseStatus.INSUFFICIENT_FUNDS, tier_index, cost)

    state.currency -= cost
    state.generator_owned[tier_index] += 1
    state.income_rate += state.generator_income_value[tier_index]

    next_price = get_tier_price(state, tier_index)
    logger.debug(
        "Bought tier %d for %d (owned=%d, income=%d)",
        tier_index, cost, state.generator_owned[tier_index], state.income_rate,
    )
    return PurchaseResult(PurchaseStatus.APPLIED, tier_index, next_price)


def format_amount(raw: int, sci_digits: int | None = None) -> str:
    """Format a tenths-unit amount for display.

    Below the scientific threshold: plain decimal with one fractional digit.
    At or above it: normalized scientific notation of raw / 10.
    """
    bal = BALANCE.economy
    if raw < 0:
        return f"-{format_amount(-raw, sci_digits)}"

    if raw >= bal.scientific_threshold:
        digits = bal.scientific_digits if sci_digits is None else sci_digits
        return format(Decimal(raw) / 10, f".{digits}e")

    return f"{raw // 10}.{raw % 10}"
