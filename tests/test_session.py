# tests/test_session.py
"""
Tests for tokenpulse.session.ScanSession.

Producers are plain async generators yielding ProgressEvents.
"""

import asyncio
import json

import pytest

from tokenpulse.core.clock import ManualClock
from tokenpulse.exceptions import ProducerError, ScanCancelledError
from tokenpulse.models.progress import LoaderStatus
from tokenpulse.models.tokens import TokenSet
from tokenpulse.realtime.registry import ConnectionRegistry
from tokenpulse.session import ProgressEvent, ScanSession
from tokenpulse.validation import ReferenceDocsValidator

FINAL_TOKENS = {
    "colors": [
        {"path": "primary", "value": "#0033FF"},
        {"path": "success", "value": "#00FF00"},
    ]
}


async def happy_scan():
    yield ProgressEvent.update({"summary": {"colors": 1}}, {"phase": "css-collection", "step": 2})
    yield ProgressEvent.update({"summary": {"colors": 2}}, {"phase": "token-generation", "step": 3})
    yield ProgressEvent.complete({"tokens": FINAL_TOKENS})


class RecordingConnection:
    def __init__(self):
        self.frames = []

    def send(self, message: str) -> None:
        self.frames.append(json.loads(message[len("data: "):]))


def run(coro):
    return asyncio.run(coro)


class TestRun:
    """Draining a progress stream."""

    def test_completes_with_snapshot(self):
        async def scenario():
            session = ScanSession(clock=ManualClock(), session_id="s1")
            state = await session.run(happy_scan())
            return session, state

        session, state = run(scenario())

        assert state.status is LoaderStatus.COMPLETE
        assert state.data["summary"] == {"colors": 2}
        assert isinstance(session.snapshot, TokenSet)
        assert session.snapshot.count() == 2
        assert session.validation is not None
        assert not session.validation.is_validated

    def test_stream_ending_early_fails(self):
        async def truncated():
            yield ProgressEvent.update({"summary": {"colors": 1}})

        async def scenario():
            session = ScanSession(clock=ManualClock())
            return await session.run(truncated())

        state = run(scenario())
        assert state.status is LoaderStatus.ERROR
        assert isinstance(state.error, ProducerError)
        assert dict(state.data) == {"summary": {"colors": 1}}

    def test_producer_is_closed_after_terminal_event(self):
        closed = []

        async def chatty():
            try:
                yield ProgressEvent.complete({"tokens": FINAL_TOKENS})
                yield ProgressEvent.update({"summary": {"colors": 9}})
            finally:
                closed.append(True)

        async def scenario():
            session = ScanSession(clock=ManualClock())
            state = await session.run(chatty())
            return state, list(closed)

        state, closed_during_run = run(scenario())
        assert state.status is LoaderStatus.COMPLETE
        assert closed_during_run == [True]

    def test_producer_exception_is_recorded(self):
        boom = RuntimeError("scanner crashed")

        async def crashing():
            yield ProgressEvent.update({"a": 1})
            raise boom

        async def scenario():
            session = ScanSession(clock=ManualClock())
            return await session.run(crashing())

        state = run(scenario())
        assert state.status is LoaderStatus.ERROR
        assert state.error is boom

    def test_fail_event_wraps_strings(self):
        async def failing():
            yield ProgressEvent.fail("rate limited")

        async def scenario():
            session = ScanSession(clock=ManualClock())
            return await session.run(failing())

        state = run(scenario())
        assert isinstance(state.error, ProducerError)
        assert str(state.error) == "rate limited"

    def test_task_cancellation_fails_then_destroys(self):
        async def endless():
            while True:
                yield ProgressEvent.update({"tick": True})
                await asyncio.sleep(0.01)

        async def scenario():
            session = ScanSession(clock=ManualClock())
            task = asyncio.create_task(session.run(endless()))
            await asyncio.sleep(0.03)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return session

        session = run(scenario())
        state = session.loader.get_state()
        assert state.status is LoaderStatus.ERROR
        assert isinstance(state.error, ScanCancelledError)
        assert session.loader.destroyed


class TestBroadcast:
    """State fan-out through an injected registry."""

    def test_every_notification_is_broadcast(self):
        registry = ConnectionRegistry()
        conn = RecordingConnection()
        registry.open(conn)

        async def scenario():
            session = ScanSession(registry=registry, clock=ManualClock(), session_id="s1")
            await session.run(happy_scan())

        run(scenario())

        statuses = [f["state"]["status"] for f in conn.frames]
        assert statuses == ["loading", "streaming", "streaming", "complete"]
        assert all(f["type"] == "scan_progress" and f["session"] == "s1" for f in conn.frames)
        assert conn.frames[-1]["skeleton"] is False


class TestLifecycle:
    """cancel(), close() and the async context manager."""

    def test_cancel(self):
        session = ScanSession(clock=ManualClock())
        session.loader.start()
        session.cancel("user navigated away")

        state = session.loader.get_state()
        assert isinstance(state.error, ScanCancelledError)
        assert str(state.error) == "user navigated away"
        assert session.loader.destroyed

    def test_context_manager_fails_on_exception(self):
        async def scenario():
            session = ScanSession(clock=ManualClock())
            with pytest.raises(ValueError):
                async with session:
                    session.loader.start()
                    raise ValueError("render crashed")
            return session

        session = run(scenario())
        assert session.loader.get_state().status is LoaderStatus.ERROR
        assert session.loader.destroyed

    def test_context_manager_closes_on_exit(self):
        async def scenario():
            async with ScanSession(clock=ManualClock()) as session:
                await session.run(happy_scan())
            return session

        session = run(scenario())
        assert session.loader.get_state().status is LoaderStatus.COMPLETE
        assert session.loader.destroyed


class TestResults:
    """Diffing and validation of the completed snapshot."""

    def test_compare_with_previous(self):
        async def scenario():
            session = ScanSession(clock=ManualClock())
            await session.run(happy_scan())
            return session

        session = run(scenario())
        diff = session.compare_with(
            {
                "colors": [
                    {"path": "primary", "value": "#0000FF"},
                    {"path": "accent", "value": "#FF0000"},
                ]
            }
        )
        assert str(diff) == "added=1, removed=1, modified=1"

    def test_compare_without_snapshot_raises(self):
        session = ScanSession(clock=ManualClock())
        with pytest.raises(ProducerError):
            session.compare_with({})

    def test_validator_runs_on_completion(self):
        docs = "--brand: #0033ff; --ok: #00FF00;"

        async def scenario():
            session = ScanSession(
                clock=ManualClock(),
                validator=ReferenceDocsValidator(docs, source="Brand docs"),
            )
            await session.run(happy_scan())
            return session

        session = run(scenario())
        assert session.validation.is_validated
        assert session.validation.source == "Brand docs"
        assert session.validation.confidence_after == 100

    def test_invalid_validator_falls_back(self):
        session = ScanSession(clock=ManualClock(), validator=object())

        async def scenario():
            await session.run(happy_scan())

        run(scenario())
        assert not session.validation.is_validated
