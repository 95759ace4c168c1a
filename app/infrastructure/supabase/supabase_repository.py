from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.dto.booking_record import parse_booking, parse_bookings
from app.application.exceptions import RemoteError, ValidationError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.core.config import settings
from app.domain.entities.booking import Booking


class SupabaseBookingRepository(BookingRepositoryPort):
    """Bookings table through the Supabase PostgREST endpoint."""

    def __init__(
        self,
        url: str | None = None,
        service_key: str | None = None,
        table: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        base_url = (url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = service_key or settings.SUPABASE_SERVICE_ROLE_KEY
        self._table = table or settings.SUPABASE_BOOKINGS_TABLE
        self._endpoint = f"{base_url}/rest/v1/{self._table}"
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not base_url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for Supabase store")

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def list_bookings(self) -> list[Booking]:
        resp = self._request(
            "GET",
            params={"select": "*", "order": "created_at.desc"},
            action="fetch bookings",
        )
        return parse_bookings(resp.json() or [])

    def get_booking(self, booking_id: str) -> Booking | None:
        resp = self._request(
            "GET",
            params={"select": "*", "id": f"eq.{booking_id}"},
            action="fetch booking",
        )
        rows = resp.json() or []
        return parse_booking(rows[0]) if rows else None

    def upsert(self, records: list[dict[str, Any]]) -> list[Booking]:
        if not all(record.get("id") for record in records):
            raise ValidationError("Each update must include an id")

        resp = self._request(
            "POST",
            json=records,
            prefer="resolution=merge-duplicates,return=representation",
            action="upsert bookings",
        )
        rows = resp.json() or []
        self._logger.info("Bookings upserted", extra={"count": len(rows)})
        return parse_bookings(rows)

    def update_fields(self, booking_id: str, fields: dict[str, Any]) -> None:
        self._request(
            "PATCH",
            params={"id": f"eq.{booking_id}"},
            json=fields,
            prefer="return=minimal",
            action="update booking",
        )

    def delete(self, booking_id: str) -> None:
        self._request(
            "DELETE",
            params={"id": f"eq.{booking_id}"},
            prefer="return=minimal",
            action="delete booking",
        )
        self._logger.info("Booking deleted", extra={"booking_id": booking_id})

    def _request(
        self,
        method: str,
        *,
        action: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        try:
            resp = self._client.request(
                method,
                self._endpoint,
                params=params,
                json=json,
                headers=self._headers(prefer),
            )
        except httpx.HTTPError as e:
            self._logger.error(f"Supabase {action} failed", extra={"error": str(e)})
            raise RemoteError(str(e)) from e

        if resp.status_code >= 400:
            try:
                message = resp.json().get("message") or resp.text
            except Exception:
                message = resp.text
            self._logger.error(
                f"Supabase {action} failed",
                extra={"status": resp.status_code, "error": message},
            )
            raise RemoteError(message, status_code=resp.status_code)
        return resp
