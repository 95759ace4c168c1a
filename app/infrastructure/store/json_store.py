from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from app.domain.entities.booking import Booking
from app.infrastructure.store.memory_store import MemoryBookingRepository


class JsonBookingRepository(MemoryBookingRepository):
    """File-backed bookings table for local development. One JSON document holds every row."""

    def __init__(self, data_dir: str = "./data", filename: str = "bookings.json") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / filename
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        super().__init__(self._load_rows())

    def list_bookings(self) -> list[Booking]:
        with self._lock:
            return super().list_bookings()

    def upsert(self, records: list[dict[str, Any]]) -> list[Booking]:
        with self._lock:
            return super().upsert(records)

    def update_fields(self, booking_id: str, fields: dict[str, Any]) -> None:
        with self._lock:
            super().update_fields(booking_id, fields)

    def delete(self, booking_id: str) -> None:
        with self._lock:
            super().delete(booking_id)

    def _load_rows(self) -> list[dict[str, Any]]:
        """Load rows from the JSON file, empty if missing or corrupted."""
        if not self._file_path.exists():
            return []
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.warning("Bookings file unreadable, starting empty", extra={"error": str(e)})
            return []
        rows = data.get("bookings", []) if isinstance(data, dict) else []
        return [row for row in rows if isinstance(row, dict) and row.get("id")]

    def _persist(self) -> None:
        """Save rows to the JSON file atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")
        data = {"bookings": self.rows(), "version": 1}
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise
