"""
Tests for display formatting helpers.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from app.application.utils.formatting import (
    format_address,
    format_currency,
    format_date,
    format_relative_time,
    format_short_address,
    google_maps_link,
    parse_preferred_date,
    project_folder_name,
)
from app.domain.entities.booking import Address


ADDRESS = Address(street="12 Main St", street2="Unit 4", city="Toronto", province="ON", zip_code="M5V 1A1")


def test_format_currency():
    """Amounts render with two decimals and thousands separators."""
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(0) == "$0.00"
    assert format_currency(None) == "N/A"


def test_preferred_date_keeps_calendar_day():
    """Date-only and midday-normalized values read back as the same day."""
    assert parse_preferred_date("2025-03-05") == date(2025, 3, 5)
    assert parse_preferred_date("2025-03-05T12:00:00") == date(2025, 3, 5)
    assert parse_preferred_date("garbage") is None
    assert parse_preferred_date(None) is None


def test_format_date():
    """Dates render as short month, day and year."""
    assert format_date("2025-03-05") == "Mar 5, 2025"
    assert format_date(date(2024, 12, 25)) == "Dec 25, 2024"
    assert format_date(None) == "N/A"


def test_format_relative_time():
    """Elapsed time is expressed in the largest whole unit."""
    now = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert format_relative_time(now - timedelta(seconds=3), now) == "just now"
    assert format_relative_time(now - timedelta(minutes=1), now) == "1 minute ago"
    assert format_relative_time(now - timedelta(hours=5), now) == "5 hours ago"
    assert format_relative_time((now - timedelta(days=2)).isoformat(), now) == "2 days ago"
    assert format_relative_time(None, now) == "N/A"


def test_address_formats():
    """Full, short and maps renderings of an address."""
    assert format_address(ADDRESS) == "12 Main St, Unit 4, Toronto, ON M5V 1A1"
    assert format_short_address(ADDRESS) == "12 Main St, Toronto"
    link = google_maps_link(ADDRESS)
    assert link.startswith("https://www.google.com/maps/dir/?api=1&destination=")
    assert "12%20Main%20St" in link


def test_project_folder_name_strips_and_collapses():
    """Folder names keep letters, digits, spaces and hyphens with whitespace collapsed."""
    assert project_folder_name("12  Main St.", "Jane O'Doe") == "12 Main St - Jane ODoe"
    assert project_folder_name("#5 King's Rd", "A&B  Realty") == "5 Kings Rd - AB Realty"
