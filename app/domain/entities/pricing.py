from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiscountTier:
    percent: int
    range_min: float
    range_max: float  # math.inf for the open-ended top tier


@dataclass(frozen=True)
class PriceQuote:
    subtotal: float
    tier: DiscountTier
    discount_amount: float
    total: float
