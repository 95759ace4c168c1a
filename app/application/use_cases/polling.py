from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from datetime import datetime, timezone
from typing import Callable

from app.application.dto.booking_record import to_record
from app.application.ports.booking_repository import BookingRepositoryPort
from app.domain.entities.booking import Booking


POLLING_INTERVAL_SECONDS = 30.0

LOAD_ERROR = "Failed to load bookings. Please try again."


def _serialize(bookings: list[Booking]) -> str:
    return json.dumps([to_record(b) for b in bookings], sort_keys=True, default=str)


class PollingSynchronizer:
    """
    Keeps the displayed booking collection fresh.

    An initial fetch runs on start, then a silent poll every interval.
    `wake()` forces an immediate visible fetch (the dashboard becoming visible
    again). Each fetch gets a generation number; a result is applied only if
    no newer fetch has started since and the synchronizer has not been stopped.
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        interval_seconds: float = POLLING_INTERVAL_SECONDS,
        on_new_bookings: Callable[[int], None] | None = None,
        on_update: Callable[[list[Booking]], None] | None = None,
    ) -> None:
        self._repository = repository
        self._interval = interval_seconds
        self._on_new_bookings = on_new_bookings
        self._on_update = on_update
        self._logger = logging.getLogger(__name__)

        self.bookings: list[Booking] = []
        self.loading = False
        self.refreshing = False
        self.error: str | None = None
        self.last_updated: datetime | None = None
        self.previous_count = 0
        self.new_bookings_count = 0
        self.state = "idle"

        self._generation = 0
        # generation of the manual or initial fetch that turned an indicator on
        self._indicator_generation: int | None = None
        self._stopped = False
        self._task: asyncio.Task | None = None
        self._wake: asyncio.Event | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    # Fetch cycle

    def fetch(self, manual: bool = False, silent: bool = False) -> list[Booking] | None:
        """Run one fetch cycle inline."""
        generation = self._begin(manual, silent)
        try:
            rows = self._repository.list_bookings()
        except Exception as e:
            self._fail(generation, silent, e)
            return None
        self._apply(generation, rows, silent)
        return rows

    async def fetch_async(self, manual: bool = False, silent: bool = False) -> list[Booking] | None:
        generation = self._begin(manual, silent)
        try:
            rows = await asyncio.to_thread(self._repository.list_bookings)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(generation, silent, e)
            return None
        self._apply(generation, rows, silent)
        return rows

    def refresh(self) -> list[Booking] | None:
        """Manual refresh: clears the new-bookings badge and always updates the display."""
        self.new_bookings_count = 0
        return self.fetch(manual=True)

    async def refresh_async(self) -> list[Booking] | None:
        self.new_bookings_count = 0
        return await self.fetch_async(manual=True)

    def _begin(self, manual: bool, silent: bool) -> int:
        self._generation += 1
        self.state = "fetching"
        if manual:
            self.refreshing = True
            self._indicator_generation = self._generation
        elif self.last_updated is None and not silent:
            self.loading = True
            self._indicator_generation = self._generation
        if not silent:
            self.error = None
        self._logger.debug("Fetching bookings", extra={"generation": self._generation})
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        return self._stopped or generation != self._generation

    def _settle_indicators(self, generation: int) -> None:
        """Stop the loading indicators once their fetch, or any fetch started after it, finishes."""
        if self._indicator_generation is not None and generation >= self._indicator_generation:
            self._indicator_generation = None
            self.loading = False
            self.refreshing = False

    def _fail(self, generation: int, silent: bool, error: Exception) -> None:
        self._settle_indicators(generation)
        if self._is_stale(generation):
            return
        self.state = "idle"
        if silent:
            self._logger.warning("Background poll failed", extra={"error": str(error)})
            return
        self._logger.error("Error fetching bookings", extra={"error": str(error)})
        self.error = LOAD_ERROR

    def _apply(self, generation: int, rows: list[Booking], silent: bool) -> None:
        self._settle_indicators(generation)
        if self._is_stale(generation):
            self._logger.debug("Discarding stale fetch result", extra={"generation": generation})
            return
        self.state = "idle"

        # Compared against the count seen at the previous fetch, not the displayed rows
        count = len(rows)
        if self.previous_count > 0 and count > self.previous_count:
            delta = count - self.previous_count
            self.new_bookings_count = delta
            self._logger.info("New bookings detected", extra={"count": delta})
            if self._on_new_bookings is not None:
                self._on_new_bookings(delta)
        self.previous_count = count

        if silent:
            if self.bookings and _serialize(rows) == _serialize(self.bookings):
                self._logger.debug("No changes detected")
                return
            self._logger.info("New data detected, updating display", extra={"count": count})
        self._display(rows)

    def _display(self, rows: list[Booking]) -> None:
        self.bookings = list(rows)
        self.last_updated = datetime.now(timezone.utc)
        if self._on_update is not None:
            self._on_update(self.bookings)

    # Scheduling

    def start(self) -> asyncio.Task:
        """Start the poll loop on the running event loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stopped = False
        self._wake = asyncio.Event()
        self._task = asyncio.create_task(self._run())
        return self._task

    def wake(self) -> None:
        if self._wake is not None:
            self._wake.set()

    async def stop(self) -> None:
        """Stop scheduling. An in-flight fetch is not aborted; its result is dropped."""
        self._stopped = True
        self.state = "idle"
        self._indicator_generation = None
        self.loading = False
        self.refreshing = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        await self.fetch_async()
        while not self._stopped:
            woke = await self._sleep()
            if self._stopped:
                return
            if woke:
                self._logger.info("Dashboard visible again, fetching fresh data")
                await self.fetch_async()
            else:
                await self.fetch_async(silent=True)

    async def _sleep(self) -> bool:
        assert self._wake is not None
        try:
            await asyncio.wait_for(self._wake.wait(), timeout=self._interval)
        except asyncio.TimeoutError:
            return False
        self._wake.clear()
        return True
