"""Unit tests for DebounceScheduler."""

import asyncio

import pytest

from tooltrack.application.autocomplete import DebounceScheduler


class Recorder:
    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, field_id: str, text: str) -> None:
        self.calls.append((field_id, text))


class TestDebounceScheduler:
    @pytest.mark.asyncio
    async def test_rapid_changes_dispatch_once_with_last_text(self, delay, settle):
        recorder = Recorder()
        scheduler = DebounceScheduler(recorder, delay=delay)

        for text in ("b", "br", "bra", "brak"):
            scheduler.schedule("row-1", text)
            await asyncio.sleep(delay / 4)

        await settle()
        assert recorder.calls == [("row-1", "brak")]

    @pytest.mark.asyncio
    async def test_b_then_br_within_window(self, settle):
        recorder = Recorder()
        scheduler = DebounceScheduler(recorder, delay=0.3)

        scheduler.schedule("row-1", "b")
        await asyncio.sleep(0.05)
        scheduler.schedule("row-1", "br")
        await settle(0.3)

        assert recorder.calls == [("row-1", "br")]

    @pytest.mark.asyncio
    async def test_fields_are_independent(self, delay, settle):
        recorder = Recorder()
        scheduler = DebounceScheduler(recorder, delay=delay)

        scheduler.schedule("row-1", "brake")
        scheduler.schedule("row-2", "chain")
        await settle()

        assert sorted(recorder.calls) == [("row-1", "brake"), ("row-2", "chain")]

    @pytest.mark.asyncio
    async def test_cancel_prevents_dispatch(self, delay, settle):
        recorder = Recorder()
        scheduler = DebounceScheduler(recorder, delay=delay)

        scheduler.schedule("row-1", "brake")
        assert scheduler.is_pending("row-1") is True
        assert scheduler.cancel("row-1") is True
        assert scheduler.is_pending("row-1") is False

        await settle()
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_cancel_without_timer(self, delay):
        scheduler = DebounceScheduler(Recorder(), delay=delay)
        assert scheduler.cancel("missing") is False

    @pytest.mark.asyncio
    async def test_cancel_all(self, delay, settle):
        recorder = Recorder()
        scheduler = DebounceScheduler(recorder, delay=delay)

        scheduler.schedule("row-1", "a")
        scheduler.schedule("row-2", "b")
        assert scheduler.pending_count == 2

        scheduler.cancel_all()
        await settle()

        assert scheduler.pending_count == 0
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_timer_is_no_longer_pending_once_fired(self, delay, settle):
        recorder = Recorder()
        scheduler = DebounceScheduler(recorder, delay=delay)

        scheduler.schedule("row-1", "oil")
        await settle()

        assert scheduler.is_pending("row-1") is False
        assert recorder.calls == [("row-1", "oil")]

    @pytest.mark.asyncio
    async def test_started_dispatch_is_not_cancelled_by_new_schedule(self, delay, settle):
        gate = asyncio.Event()
        finished: list[str] = []

        async def slow_dispatch(field_id: str, text: str) -> None:
            await gate.wait()
            finished.append(text)

        scheduler = DebounceScheduler(slow_dispatch, delay=delay)
        scheduler.schedule("row-1", "br")
        await settle()

        # "br" is in flight; a new keystroke arms a new timer only
        scheduler.schedule("row-1", "brake")
        gate.set()
        await settle()

        assert finished == ["br", "brake"]

    @pytest.mark.asyncio
    async def test_dispatch_error_is_contained(self, delay, settle):
        async def failing_dispatch(field_id: str, text: str) -> None:
            raise RuntimeError("search backend down")

        scheduler = DebounceScheduler(failing_dispatch, delay=delay)
        scheduler.schedule("row-1", "brake")
        await settle()

        assert scheduler.pending_count == 0

    @pytest.mark.asyncio
    async def test_shutdown_cancels_timers_and_inflight(self, delay, settle):
        started = asyncio.Event()

        async def hanging_dispatch(field_id: str, text: str) -> None:
            started.set()
            await asyncio.sleep(3600)

        scheduler = DebounceScheduler(hanging_dispatch, delay=delay)
        scheduler.schedule("row-1", "hang")
        await settle()
        assert started.is_set()

        scheduler.schedule("row-2", "pending")
        await asyncio.wait_for(scheduler.shutdown(), timeout=1)

        assert scheduler.pending_count == 0
