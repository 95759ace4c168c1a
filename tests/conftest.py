from __future__ import annotations

from typing import Any, Callable

import pytest

from app.application.exceptions import RemoteError
from app.infrastructure.store.memory_store import MemoryBookingRepository


def _row(booking_id: str = "b1", **overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": booking_id,
        "created_at": "2025-03-01T10:00:00+00:00",
        "agent_name": "Jane Doe",
        "agent_email": "jane@example.com",
        "agent_phone": "555-0100",
        "agent_company": "Acme Realty",
        "address": {
            "street": "12 Main St",
            "street2": "",
            "city": "Toronto",
            "province": "ON",
            "zipCode": "M5V 1A1",
        },
        "property_size": "1000-2000 sq ft",
        "property_status": "Vacant",
        "services": [{"name": "HDR Photography", "price": 199.99, "count": 1}],
        "total_amount": 199.99,
        "status": "pending",
        "payment_status": "not_paid",
        "editing_status": "unassigned",
        "preferred_date": "2025-03-05",
        "time": "10:00:00",
        "notes": "",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row() -> Callable[..., dict[str, Any]]:
    return _row


class RecordingRepository(MemoryBookingRepository):
    """Memory repository that records upsert calls and can be told to fail."""

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        super().__init__(rows)
        self.upserts: list[list[dict[str, Any]]] = []
        self.list_calls = 0
        self.fail_with: str | None = None

    def list_bookings(self):
        self.list_calls += 1
        if self.fail_with:
            raise RemoteError(self.fail_with)
        return super().list_bookings()

    def upsert(self, records):
        self.upserts.append(records)
        if self.fail_with:
            raise RemoteError(self.fail_with, status_code=400)
        return super().upsert(records)


@pytest.fixture
def repository() -> RecordingRepository:
    return RecordingRepository([_row("b1"), _row("b2", created_at="2025-03-02T10:00:00+00:00")])


@pytest.fixture
def make_repository() -> Callable[..., RecordingRepository]:
    return RecordingRepository
