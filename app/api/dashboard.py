from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.schemas import DashboardStateSchema
from app.application.dto.booking_record import to_record
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.use_cases.polling import PollingSynchronizer
from app.application.use_cases.table_editor import TableAggregateEditor
from app.application.utils.formatting import format_relative_time, google_maps_link
from app.wiring.dependencies import get_booking_repository, get_synchronizer


router = APIRouter(prefix="/api/dashboard")


def _state(sync: PollingSynchronizer) -> DashboardStateSchema:
    return DashboardStateSchema(
        bookings=[to_record(b) for b in sync.bookings],
        loading=sync.loading,
        refreshing=sync.refreshing,
        error=sync.error,
        last_updated=sync.last_updated.isoformat() if sync.last_updated else None,
        last_updated_relative=format_relative_time(sync.last_updated) if sync.last_updated else None,
        new_bookings_count=sync.new_bookings_count,
        polling_interval_seconds=sync.interval_seconds,
    )


@router.get("", response_model=DashboardStateSchema)
def dashboard(sync: PollingSynchronizer = Depends(get_synchronizer)) -> DashboardStateSchema:
    return _state(sync)


@router.post("/refresh", response_model=DashboardStateSchema)
async def refresh(sync: PollingSynchronizer = Depends(get_synchronizer)) -> DashboardStateSchema:
    await sync.refresh_async()
    return _state(sync)


@router.post("/visible")
async def visible(sync: PollingSynchronizer = Depends(get_synchronizer)) -> dict[str, bool]:
    sync.wake()
    return {"success": True}


@router.get("/schedule")
def schedule(
    day: str | None = Query(None),
    sync: PollingSynchronizer = Depends(get_synchronizer),
    repository: BookingRepositoryPort = Depends(get_booking_repository),
) -> dict[str, Any]:
    try:
        selected = date.fromisoformat(day) if day else date.today()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Please use YYYY-MM-DD format.")

    editor = TableAggregateEditor(repository=repository)
    editor.load(sync.bookings)
    return {
        "day": selected.isoformat(),
        "data": [
            {**to_record(b), "maps_link": google_maps_link(b.address)}
            for b in editor.day_schedule(selected)
        ],
    }
