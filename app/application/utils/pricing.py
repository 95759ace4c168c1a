from __future__ import annotations

import math
from typing import Iterable

from app.domain.entities.booking import SelectedService
from app.domain.entities.pricing import DiscountTier, PriceQuote


# (threshold, percent, range_max), evaluated highest threshold first
DISCOUNT_TABLE: tuple[tuple[float, int, float], ...] = (
    (1100, 17, math.inf),
    (900, 15, 1099.99),
    (700, 12, 899.99),
    (500, 10, 699.99),
    (350, 5, 499.99),
    (199.99, 3, 349.99),
)

NO_DISCOUNT = DiscountTier(percent=0, range_min=0, range_max=199.98)


def line_total(service: SelectedService) -> float:
    return service.price * max(service.count, 1)


def aggregate_total(services: Iterable[SelectedService]) -> float:
    return sum((line_total(s) for s in services), 0.0)


def discount_tier(total: float) -> DiscountTier:
    for threshold, percent, range_max in DISCOUNT_TABLE:
        if total >= threshold:
            return DiscountTier(percent=percent, range_min=threshold, range_max=range_max)
    return NO_DISCOUNT


def discounted_total(total: float) -> float:
    percent = discount_tier(total).percent
    return total * (1 - percent / 100)


def build_quote(services: Iterable[SelectedService]) -> PriceQuote:
    subtotal = aggregate_total(services)
    tier = discount_tier(subtotal)
    total = discounted_total(subtotal)
    return PriceQuote(
        subtotal=subtotal,
        tier=tier,
        discount_amount=subtotal - total,
        total=total,
    )
