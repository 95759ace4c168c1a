"""
Tests for the booking polling synchronizer.
"""

from __future__ import annotations

import asyncio
import threading

from app.application.use_cases.polling import LOAD_ERROR, PollingSynchronizer
from app.infrastructure.store.memory_store import MemoryBookingRepository


def _rows(make_row, count: int, prefix: str = "b") -> list[dict]:
    return [
        make_row(f"{prefix}{i}", created_at=f"2025-03-01T10:{i:02d}:00+00:00")
        for i in range(count)
    ]


def test_new_bookings_event_fires_once_per_increase(make_repository, make_row):
    """Going from 10 to 12 rows reports 2 new bookings once and records the new count."""
    repo = make_repository(_rows(make_row, 10))
    events: list[int] = []
    sync = PollingSynchronizer(repository=repo, on_new_bookings=events.append)

    sync.fetch()
    assert events == []
    assert sync.previous_count == 10

    repo.upsert(_rows(make_row, 2, prefix="n"))
    sync.fetch(silent=True)
    assert events == [2]
    assert sync.new_bookings_count == 2
    assert sync.previous_count == 12

    sync.fetch(silent=True)
    assert events == [2]


def test_manual_refresh_clears_badge(make_repository, make_row):
    """A manual refresh resets the new bookings count and always updates the display."""
    repo = make_repository(_rows(make_row, 3))
    sync = PollingSynchronizer(repository=repo)
    sync.fetch()
    repo.upsert(_rows(make_row, 1, prefix="n"))
    sync.fetch(silent=True)
    assert sync.new_bookings_count == 1

    sync.refresh()

    assert sync.new_bookings_count == 0
    assert sync.refreshing is False
    assert len(sync.bookings) == 4


def test_silent_poll_skips_unchanged_payload(repository):
    """Identical data on a silent poll leaves the displayed collection alone."""
    updates: list[int] = []
    sync = PollingSynchronizer(repository=repository, on_update=lambda rows: updates.append(len(rows)))
    sync.fetch()
    displayed = sync.bookings
    stamp = sync.last_updated

    sync.fetch(silent=True)

    assert sync.bookings is displayed
    assert sync.last_updated == stamp
    assert updates == [2]


def test_silent_poll_applies_changed_payload(repository):
    """A silent poll that sees different data replaces the display."""
    sync = PollingSynchronizer(repository=repository)
    sync.fetch()

    repository.update_fields("b1", {"status": "completed"})
    sync.fetch(silent=True)

    assert next(b for b in sync.bookings if b.id == "b1").status == "completed"


def test_silent_failure_is_swallowed(repository):
    """Background poll errors never reach the display."""
    sync = PollingSynchronizer(repository=repository)
    sync.fetch()
    repository.fail_with = "timeout"

    assert sync.fetch(silent=True) is None
    assert sync.error is None
    assert len(sync.bookings) == 2


def test_manual_failure_surfaces_error(repository):
    """Initial and manual fetch errors set the error and stop the indicators."""
    repository.fail_with = "timeout"
    sync = PollingSynchronizer(repository=repository)

    sync.fetch()
    assert sync.error == LOAD_ERROR
    assert sync.loading is False

    sync.refresh()
    assert sync.error == LOAD_ERROR
    assert sync.refreshing is False

    repository.fail_with = None
    sync.refresh()
    assert sync.error is None


class _OverlappingRepository(MemoryBookingRepository):
    """First listing starts a newer fetch before returning its own stale result."""

    def __init__(self, rows):
        super().__init__(rows)
        self.sync: PollingSynchronizer | None = None
        self.calls = 0

    def list_bookings(self):
        self.calls += 1
        if self.calls == 1:
            self.sync.refresh()
            return []
        return super().list_bookings()


def test_stale_fetch_result_is_discarded(make_row):
    """Only the most recently started fetch is applied."""
    repo = _OverlappingRepository([make_row("b1"), make_row("b2")])
    sync = PollingSynchronizer(repository=repo)
    repo.sync = sync

    sync.fetch(silent=True)

    assert repo.calls == 2
    assert len(sync.bookings) == 2


def test_result_after_stop_is_dropped(repository):
    """Once stopped, completed fetches no longer touch state."""
    sync = PollingSynchronizer(repository=repository)
    asyncio.run(sync.stop())

    sync.fetch()

    assert sync.bookings == []
    assert sync.last_updated is None


async def _wait_until(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.005)


def test_poll_loop_runs_and_stops(repository):
    """The loop fetches on start, keeps polling and stops cleanly."""

    async def scenario():
        sync = PollingSynchronizer(repository=repository, interval_seconds=0.01)
        sync.start()
        await _wait_until(lambda: repository.list_calls >= 3)
        await sync.stop()
        return sync

    sync = asyncio.run(scenario())

    assert len(sync.bookings) == 2
    assert sync.state == "idle"


def test_wake_triggers_immediate_fetch(repository):
    """Becoming visible again fetches without waiting for the interval."""

    async def scenario():
        sync = PollingSynchronizer(repository=repository, interval_seconds=60)
        sync.start()
        await _wait_until(lambda: sync.last_updated is not None)
        repository.update_fields("b2", {"notes": "gate code 1234"})

        sync.wake()
        await _wait_until(lambda: repository.list_calls >= 2)
        await _wait_until(lambda: any(b.notes for b in sync.bookings))
        await sync.stop()
        return sync

    sync = asyncio.run(scenario())

    assert next(b for b in sync.bookings if b.id == "b2").notes == "gate code 1234"


class _GatedRepository(MemoryBookingRepository):
    """First listing blocks until the gate opens; later listings return at once."""

    def __init__(self, rows):
        super().__init__(rows)
        self.gate = threading.Event()
        self.calls = 0

    def list_bookings(self):
        self.calls += 1
        if self.calls == 1:
            self.gate.wait(timeout=5)
        return super().list_bookings()


def test_poll_during_manual_refresh_clears_indicator(make_row):
    """A poll finishing while a refresh is in flight still stops the refresh indicator."""
    repo = _GatedRepository([make_row("b1"), make_row("b2")])

    async def scenario():
        sync = PollingSynchronizer(repository=repo)
        manual = asyncio.create_task(sync.fetch_async(manual=True))
        await _wait_until(lambda: repo.calls == 1)
        assert sync.refreshing is True

        await sync.fetch_async(silent=True)
        assert sync.refreshing is False

        repo.gate.set()
        await manual
        return sync

    sync = asyncio.run(scenario())

    assert sync.refreshing is False
    assert sync.loading is False
    assert sync.state == "idle"
    assert len(sync.bookings) == 2
