from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from app.api.schemas import ComposedEmailSchema
from app.application.dto.booking_record import to_record
from app.application.exceptions import RemoteError, ValidationError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.use_cases.table_editor import ALL, TableAggregateEditor
from app.application.utils.email_templates import compose_media_ready_email
from app.core.config import settings
from app.wiring.dependencies import get_booking_repository


router = APIRouter(prefix="/api/bookings")
logger = logging.getLogger(__name__)


def _remote_http_error(e: RemoteError) -> HTTPException:
    return HTTPException(status_code=e.status_code or 502, detail=str(e))


@router.get("")
def list_bookings(
    status: str = Query(ALL),
    payment_status: str = Query(ALL),
    editing_status: str = Query(ALL),
    sort: str = Query("created_at"),
    direction: str | None = Query(None, pattern="^(asc|desc)$"),
    repository: BookingRepositoryPort = Depends(get_booking_repository),
) -> dict[str, Any]:
    try:
        editor = TableAggregateEditor(repository=repository)
        editor.load(repository.list_bookings())
        editor.set_filter("status", status)
        editor.set_filter("payment_status", payment_status)
        editor.set_filter("editing_status", editing_status)
        if sort != editor.sort_field:
            editor.sort_by(sort)
        if direction and direction != editor.sort_direction:
            editor.sort_by(sort)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RemoteError as e:
        raise _remote_http_error(e)

    return {"data": [to_record(b) for b in editor.visible()]}


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    repository: BookingRepositoryPort = Depends(get_booking_repository),
) -> dict[str, Any]:
    try:
        booking = repository.get_booking(booking_id)
    except RemoteError as e:
        raise _remote_http_error(e)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found.")
    return {"data": to_record(booking)}


@router.post("/update")
def update_bookings(
    updates: Any = Body(...),
    repository: BookingRepositoryPort = Depends(get_booking_repository),
) -> dict[str, Any]:
    if not isinstance(updates, list):
        raise HTTPException(status_code=400, detail="Request body must be an array of updates")
    if not all(isinstance(u, dict) and u.get("id") for u in updates):
        raise HTTPException(status_code=400, detail="Each update must include an id")

    try:
        saved = repository.upsert(updates)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RemoteError as e:
        raise HTTPException(status_code=e.status_code or 400, detail=str(e))

    if not saved:
        raise HTTPException(status_code=500, detail="No data returned from update")

    logger.info("Bookings updated", extra={"count": len(saved)})
    return {"data": [to_record(b) for b in saved]}


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: str,
    repository: BookingRepositoryPort = Depends(get_booking_repository),
) -> dict[str, bool]:
    try:
        repository.delete(booking_id)
    except RemoteError as e:
        raise _remote_http_error(e)
    return {"success": True}


@router.get("/{booking_id}/media-ready-email", response_model=ComposedEmailSchema)
def media_ready_email(
    booking_id: str,
    repository: BookingRepositoryPort = Depends(get_booking_repository),
) -> ComposedEmailSchema:
    try:
        booking = repository.get_booking(booking_id)
    except RemoteError as e:
        raise _remote_http_error(e)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found.")

    email = compose_media_ready_email(booking, settings.BUSINESS_NAME, settings.BUSINESS_SIGNATURE)
    return ComposedEmailSchema(to=email.to, subject=email.subject, text=email.text, html=email.html)
