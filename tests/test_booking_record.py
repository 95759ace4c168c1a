"""
Tests for the booking row parser boundary.
"""

from __future__ import annotations

import json

from app.application.dto.booking_record import parse_address, parse_booking, to_record
from app.domain.entities.booking import Address


def test_structured_and_serialized_address_parse_alike(make_row):
    """Address stored as an object or as a JSON string yields the same entity."""
    row = make_row()
    legacy = make_row(address=json.dumps(row["address"]))

    assert parse_booking(row).address == parse_booking(legacy).address
    assert parse_booking(row).address.zip_code == "M5V 1A1"


def test_malformed_address_renders_empty():
    """Unparseable addresses become empty fields instead of raising."""
    for value in ("{not json", "[1, 2]", 42, None, ""):
        assert parse_address(value) == Address()


def test_serialized_services_are_normalized(make_row):
    """Services stored as a JSON string parse to the same sequence, with missing counts as 1."""
    row = make_row(services=json.dumps([{"name": "HDR Photography", "price": 199.99}]))
    booking = parse_booking(row)

    assert len(booking.services) == 1
    assert booking.services[0].count == 1
    assert booking.services[0].price == 199.99


def test_malformed_services_become_empty(make_row):
    """Garbage in the services column parses to no services."""
    assert parse_booking(make_row(services="oops")).services == ()
    assert parse_booking(make_row(services=[{"price": 10}])).services == ()


def test_bad_service_price_and_count_are_coerced(make_row):
    """A non-numeric price reads as 0 and a bad count as 1, keeping the rest of the row."""
    services = [
        {"name": "HDR Photography", "price": "TBD", "count": "two"},
        {"name": "Drone Photos", "price": "149.5", "count": -3},
        {"name": "Floor Plans", "price": None, "count": 0},
    ]
    booking = parse_booking(make_row(services=json.dumps(services)))

    assert [(s.name, s.price, s.count) for s in booking.services] == [
        ("HDR Photography", 0.0, 1),
        ("Drone Photos", 149.5, 1),
        ("Floor Plans", 0.0, 1),
    ]
    assert booking.agent_name == "Jane Doe"


def test_nulls_fall_back_to_defaults(make_row):
    """Null statuses and text fields get their defaults."""
    booking = parse_booking(
        make_row(status=None, payment_status="", editing_status=None, agent_phone=None, total_amount=None)
    )

    assert booking.status == "pending"
    assert booking.payment_status == "not_paid"
    assert booking.editing_status == "unassigned"
    assert booking.agent_phone == ""
    assert booking.total_amount == 0.0


def test_unknown_columns_survive_round_trip(make_row):
    """Columns the dashboard does not model are written back untouched."""
    booking = parse_booking(make_row(id=7, lockbox_code="1234"))

    assert booking.id == "7"
    assert booking.extra == {"lockbox_code": "1234"}
    record = to_record(booking)
    assert record["lockbox_code"] == "1234"
    assert record["address"]["zipCode"] == "M5V 1A1"


def test_to_record_omits_missing_created_at(make_row):
    """A booking without created_at leaves the column to the store."""
    booking = parse_booking(make_row(created_at=None))
    assert "created_at" not in to_record(booking)
