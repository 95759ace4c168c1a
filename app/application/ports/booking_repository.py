from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities.booking import Booking


class BookingRepositoryPort(ABC):
    @abstractmethod
    def list_bookings(self) -> list[Booking]:
        """Fetch the whole collection ordered by created_at, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, records: list[dict[str, Any]]) -> list[Booking]:
        """
        Insert or update rows keyed by id (last write wins at row level).
        Columns missing from a record are left untouched on existing rows.
        Returns the server-normalized rows.
        """
        raise NotImplementedError

    @abstractmethod
    def update_fields(self, booking_id: str, fields: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: str) -> None:
        raise NotImplementedError
