from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable

from app.application.dto.booking_record import to_record
from app.application.exceptions import RemoteError, ValidationError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.utils.formatting import parse_preferred_date
from app.domain.entities.booking import STATUS_FIELDS, Booking


ALL = "all"
SORT_FIELDS = ("created_at", "preferred_date")
DEFAULT_SORT_DIRECTION = {"created_at": "desc", "preferred_date": "asc"}


def _parse_moment(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value if "T" in value or " " in value else f"{value}T12:00:00"
    try:
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class TableAggregateEditor:
    """
    List-view state: the last fetched collection, client-side filters and sort,
    and a pending patch set of status edits flushed together by save_all().
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        refresh: Callable[[], Any] | None = None,
    ) -> None:
        self._repository = repository
        self._refresh = refresh
        self._bookings: tuple[Booking, ...] = ()
        self._pending: dict[str, dict[str, str]] = {}
        self._filters: dict[str, str] = {name: ALL for name in STATUS_FIELDS}
        self._sort_field = "created_at"
        self._sort_direction = DEFAULT_SORT_DIRECTION["created_at"]
        self._logger = logging.getLogger(__name__)

    def load(self, bookings: list[Booking]) -> None:
        self._bookings = tuple(bookings)

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    @property
    def pending(self) -> dict[str, dict[str, str]]:
        return {booking_id: dict(patch) for booking_id, patch in self._pending.items()}

    @property
    def filters(self) -> dict[str, str]:
        return dict(self._filters)

    @property
    def sort_field(self) -> str:
        return self._sort_field

    @property
    def sort_direction(self) -> str:
        return self._sort_direction

    # Pending status edits

    def set_status_field(self, booking_id: str, field: str, value: str) -> None:
        if field not in STATUS_FIELDS:
            raise ValidationError(f"Unknown status field: {field}")
        if value not in STATUS_FIELDS[field]:
            raise ValidationError(f"Invalid {field}: {value}")
        if self._find(booking_id) is None:
            raise ValidationError(f"Unknown booking id: {booking_id}")

        patch = dict(self._pending.get(booking_id, {}))
        patch[field] = value
        self._pending = {**self._pending, booking_id: patch}

    def has_pending_changes(self) -> bool:
        return bool(self._pending)

    def discard_changes(self) -> None:
        self._pending = {}

    def save_all(self) -> list[Booking]:
        if not self._pending:
            return []

        records: list[dict[str, Any]] = []
        for booking_id, patch in self._pending.items():
            original = self._find(booking_id)
            if original is None:
                raise ValidationError(f"Booking {booking_id} is no longer in the list")
            record = to_record(original)
            record.update(patch)
            records.append(record)

        try:
            saved = self._repository.upsert(records)
        except RemoteError as e:
            self._logger.error("Error saving changes", extra={"count": len(records), "error": str(e)})
            raise

        self._pending = {}
        self._logger.info("Saved status changes", extra={"count": len(records)})
        self._trigger_refresh()
        return saved

    def delete_record(self, booking_id: str) -> None:
        """Delete immediately, outside the pending patch cycle. Callers confirm with the user first."""
        if not booking_id:
            raise ValidationError("Booking id is required")
        self._repository.delete(booking_id)
        self._logger.info("Booking deleted", extra={"booking_id": booking_id})
        self._trigger_refresh()

    # Filtering and sorting

    def set_filter(self, field: str, value: str) -> None:
        if field not in STATUS_FIELDS:
            raise ValidationError(f"Unknown filter field: {field}")
        if value != ALL and value not in STATUS_FIELDS[field]:
            raise ValidationError(f"Invalid {field}: {value}")
        self._filters[field] = value

    def clear_filters(self) -> None:
        self._filters = {name: ALL for name in STATUS_FIELDS}

    def sort_by(self, field: str) -> None:
        if field not in SORT_FIELDS:
            raise ValidationError(f"Unknown sort field: {field}")
        if field == self._sort_field:
            self._sort_direction = "asc" if self._sort_direction == "desc" else "desc"
        else:
            self._sort_field = field
            self._sort_direction = DEFAULT_SORT_DIRECTION[field]

    def visible(self) -> list[Booking]:
        rows = [b for b in self._bookings if self._matches(b)]
        dated = [b for b in rows if _parse_moment(getattr(b, self._sort_field)) is not None]
        undated = [b for b in rows if _parse_moment(getattr(b, self._sort_field)) is None]
        dated.sort(
            key=lambda b: _parse_moment(getattr(b, self._sort_field)),
            reverse=self._sort_direction == "desc",
        )
        return dated + undated

    def display_value(self, booking: Booking, field: str) -> str:
        """Status shown in the row: the pending edit if any, else the fetched value."""
        return self._pending.get(booking.id, {}).get(field, getattr(booking, field))

    def day_schedule(self, day: date) -> list[Booking]:
        """Bookings shot on `day`: timed ones first by time, then untimed in list order."""
        on_day = [b for b in self._bookings if parse_preferred_date(b.preferred_date) == day]
        timed = sorted((b for b in on_day if b.time), key=lambda b: b.time or "")
        untimed = [b for b in on_day if not b.time]
        return timed + untimed

    def _matches(self, booking: Booking) -> bool:
        return all(
            value == ALL or getattr(booking, name) == value
            for name, value in self._filters.items()
        )

    def _find(self, booking_id: str) -> Booking | None:
        return next((b for b in self._bookings if b.id == booking_id), None)

    def _trigger_refresh(self) -> None:
        if self._refresh is not None:
            self._refresh()
