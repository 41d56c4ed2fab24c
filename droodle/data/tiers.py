"""Generator tier definitions — the fixed list of things you can buy."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TierDef:
    """Definition of a single generator tier."""

    name: str
    description: str
    # Price at zero owned (tenths)
    base_price: int
    # Income per accrual tick contributed by each unit owned (tenths)
    income_value: int


PIRATE = TierDef(
    name="Pirate",
    description="Plunders a little loose change every second.",
    base_price=100,
    income_value=1,
)

CAMEL = TierDef(
    name="Camel",
    description="Carries Droodles across the desert.",
    base_price=1_000,
    income_value=10,
)

COMMUNE = TierDef(
    name="Commune",
    description="From each according to their clicks.",
    base_price=10_000,
    income_value=100,
)

FAN_CLUB = TierDef(
    name="Fan Club",
    description="Devoted followers mailing in Droodles.",
    base_price=100_000,
    income_value=1_000,
)


# Order matters: a tier's position is its tier index.
ALL_TIERS: tuple[TierDef, ...] = (PIRATE, CAMEL, COMMUNE, FAN_CLUB)


def tier_name(tier_index: int) -> str:
    """Display name; saves may carry more tiers than the catalogue."""
    if 0 <= tier_index < len(ALL_TIERS):
        return ALL_TIERS[tier_index].name
    return f"Tier {tier_index + 1}"
