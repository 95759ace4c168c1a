from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

from app.application.dto.booking_record import parse_booking
from app.application.exceptions import ValidationError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.domain.entities.booking import Booking


class MemoryBookingRepository(BookingRepositoryPort):
    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        self._rows: dict[str, dict[str, Any]] = {}
        for row in rows or []:
            self._rows[str(row["id"])] = copy.deepcopy(row)

    def list_bookings(self) -> list[Booking]:
        rows = sorted(self._rows.values(), key=lambda r: r.get("created_at") or "", reverse=True)
        return [parse_booking(row) for row in rows]

    def get_booking(self, booking_id: str) -> Booking | None:
        row = self._rows.get(booking_id)
        return parse_booking(row) if row is not None else None

    def upsert(self, records: list[dict[str, Any]]) -> list[Booking]:
        if not all(record.get("id") for record in records):
            raise ValidationError("Each update must include an id")

        # every row is parsed before any is committed
        staged: dict[str, dict[str, Any]] = {}
        saved: list[Booking] = []
        for record in records:
            booking_id = str(record["id"])
            stored = self._rows.get(booking_id)
            row = copy.deepcopy(staged.get(booking_id, stored or {}))
            row.update(copy.deepcopy(record))
            row["id"] = booking_id
            # created_at is server-assigned and immutable
            if stored and stored.get("created_at"):
                row["created_at"] = stored["created_at"]
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            saved.append(parse_booking(row))
            staged[booking_id] = row

        previous = dict(self._rows)
        self._rows.update(staged)
        try:
            self._persist()
        except Exception:
            self._rows = previous
            raise
        return saved

    def update_fields(self, booking_id: str, fields: dict[str, Any]) -> None:
        row = self._rows.get(booking_id)
        if row is None:
            return
        row.update(copy.deepcopy(fields))
        self._persist()

    def delete(self, booking_id: str) -> None:
        self._rows.pop(booking_id, None)
        self._persist()

    def rows(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(row) for row in self._rows.values()]

    def _persist(self) -> None:
        pass
