"""
Tests for the pricing engine: line totals, discount tiers and quotes.
"""

from __future__ import annotations

import math

import pytest

from app.application.utils.pricing import (
    aggregate_total,
    build_quote,
    discount_tier,
    discounted_total,
    line_total,
)
from app.domain.entities.booking import SelectedService


@pytest.mark.parametrize(
    "total, percent",
    [
        (0, 0),
        (199.98, 0),
        (199.99, 3),
        (349.99, 3),
        (350, 5),
        (499.99, 5),
        (500, 10),
        (700, 12),
        (900, 15),
        (1099.99, 15),
        (1100, 17),
        (25000, 17),
        (-10, 0),
    ],
)
def test_discount_tier_breakpoints(total, percent):
    """Highest threshold not above the total wins; below 199.99 there is no discount."""
    assert discount_tier(total).percent == percent


def test_discount_tier_ranges():
    """Tiers expose their range bounds; the top tier is open-ended."""
    top = discount_tier(5000)
    assert top.range_min == 1100
    assert math.isinf(top.range_max)

    none = discount_tier(10)
    assert none.range_min == 0
    assert none.range_max == 199.98


def test_discounted_total_only_reduces_with_a_discount():
    """No discount leaves the total untouched; any discount lowers it."""
    assert discounted_total(150) == 150
    assert discounted_total(0) == 0
    for total in (199.99, 400, 650, 800, 1000, 2000):
        assert discounted_total(total) < total
    assert discounted_total(1000) == pytest.approx(850)


def test_line_total_treats_missing_count_as_one():
    """A zero count is billed as one unit."""
    assert line_total(SelectedService(name="Drone", price=124.99, count=0)) == 124.99
    assert line_total(SelectedService(name="Drone", price=124.99, count=3)) == pytest.approx(374.97)


def test_aggregate_total_is_order_independent():
    """Sum of price x count does not depend on sequence order."""
    services = [
        SelectedService(name="HDR Photography", price=199.99, count=2),
        SelectedService(name="2D Floor Plan", price=119.99, count=1),
        SelectedService(name="Virtual Staging", price=39.99, count=4),
    ]
    expected = 199.99 * 2 + 119.99 + 39.99 * 4
    assert aggregate_total(services) == pytest.approx(expected)
    assert aggregate_total(list(reversed(services))) == pytest.approx(expected)
    assert aggregate_total([]) == 0


def test_build_quote_for_two_hdr_shoots():
    """Two HDR shoots at 199.99 land in the 5% tier."""
    quote = build_quote([SelectedService(name="HDR Photography", price=199.99, count=2)])

    assert quote.subtotal == pytest.approx(399.98)
    assert quote.tier.percent == 5
    assert quote.total == pytest.approx(379.981)
    assert quote.discount_amount == pytest.approx(19.999)
