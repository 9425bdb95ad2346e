# tests/test_progressive_loader.py
"""
Tests for tokenpulse.loader.loader.ProgressiveLoader.

Time is driven with ManualClock so the skeleton floor and ceiling are
checked exactly, without sleeping.
"""

import pytest

from tokenpulse.config.schema import LoaderConfig
from tokenpulse.core.clock import ManualClock
from tokenpulse.loader.loader import ProgressiveLoader
from tokenpulse.models.progress import LoaderStatus


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def loader(clock):
    return ProgressiveLoader(
        LoaderConfig(skeleton_timeout=2000, min_skeleton_duration=200), clock=clock
    )


class Recorder:
    """Subscriber that records every state it sees."""

    def __init__(self):
        self.states = []

    def __call__(self, state):
        self.states.append(state)

    @property
    def statuses(self):
        return [s.status for s in self.states]


class TestSkeletonTiming:
    """Floor and ceiling properties."""

    def test_floor_holds_with_data(self, loader, clock):
        loader.start()
        loader.update({"colors": ["#000"]})

        assert loader.get_state().status is LoaderStatus.STREAMING
        clock.advance(199)
        assert loader.should_show_skeleton()
        clock.advance(1)
        assert not loader.should_show_skeleton()

    def test_ceiling_without_data(self, loader, clock):
        loader.start()

        clock.advance(1999)
        assert loader.should_show_skeleton()
        clock.advance(1)
        assert not loader.should_show_skeleton()

    def test_elapsed(self, loader, clock):
        assert loader.elapsed() == 0
        loader.start()
        clock.advance(120)
        assert loader.elapsed() == 120

    def test_refresh_republishes_when_floor_passes(self, loader, clock):
        rec = Recorder()
        loader.subscribe(rec)
        loader.start()
        loader.update({"a": 1})
        seen = len(rec.states)

        assert not loader.refresh()
        clock.advance(250)
        assert loader.refresh()
        assert len(rec.states) == seen + 1
        assert not loader.refresh()

    def test_mapping_config_accepts_camel_case(self, clock):
        loader = ProgressiveLoader({"skeletonTimeout": 500, "minSkeletonDuration": 50}, clock=clock)
        assert loader.config.skeleton_timeout == 500
        assert loader.config.min_skeleton_duration == 50

    def test_transition_style(self, loader):
        assert loader.transition_style() == "transition-all duration-300 ease-out"


class TestTerminalStates:
    """Terminal idempotence and error delivery."""

    def test_fail_then_fail_then_complete(self, loader):
        rec = Recorder()
        loader.subscribe(rec)
        e1 = RuntimeError("e1")

        loader.start()
        loader.fail(e1)
        loader.fail(RuntimeError("e2"))
        loader.complete({"x": 1})

        state = loader.get_state()
        assert state.status is LoaderStatus.ERROR
        assert state.error is e1
        assert rec.statuses == [LoaderStatus.LOADING, LoaderStatus.ERROR]

    def test_error_keeps_last_partial_data(self, loader):
        loader.start()
        loader.update({"colors": ["#000"]})
        loader.fail("network down")

        state = loader.get_state()
        assert dict(state.data) == {"colors": ("#000",)}
        assert str(state.error) == "network down"

    def test_updates_after_complete_are_ignored(self, loader):
        loader.start()
        loader.complete({"done": True})
        loader.update({"late": True})

        assert dict(loader.get_state().data) == {"done": True}


class TestSnapshotIsolation:
    """Published state cannot be changed from outside the loader."""

    def test_subscriber_cannot_mutate_accumulated_data(self, loader):
        loader.start()
        loader.update({"colors": [{"path": "primary", "value": "#0000FF"}]})
        snapshot = loader.get_state()

        with pytest.raises(AttributeError):
            snapshot.data["colors"].append({"path": "injected"})
        with pytest.raises(TypeError):
            snapshot.data["colors"][0]["path"] = "renamed"

        assert [c["path"] for c in loader.get_state().data["colors"]] == ["primary"]

    def test_producer_reusing_payload_does_not_leak(self, loader):
        payload = {"colors": [{"path": "primary", "value": "#0000FF"}], "summary": {"colors": 1}}
        loader.start()
        loader.update(payload)

        payload["colors"].append({"path": "late", "value": "#FFFFFF"})
        payload["summary"]["colors"] = 99

        data = loader.get_state().data
        assert len(data["colors"]) == 1
        assert data["summary"]["colors"] == 1

    def test_earlier_snapshots_are_unchanged_by_later_updates(self, loader):
        loader.start()
        loader.update({"summary": {"colors": 1}})
        first = loader.get_state()
        loader.update({"summary": {"colors": 2, "fonts": 1}})

        assert dict(first.data["summary"]) == {"colors": 1}
        assert dict(loader.get_state().data["summary"]) == {"colors": 2, "fonts": 1}


class TestSubscribers:
    """Notification order, isolation and re-entrancy."""

    def test_subscribers_notified_in_order(self, loader):
        calls = []
        loader.subscribe(lambda s: calls.append("first"))
        loader.subscribe(lambda s: calls.append("second"))

        loader.start()
        assert calls == ["first", "second"]

    def test_emit_current(self, loader):
        rec = Recorder()
        loader.subscribe(rec, emit_current=True)
        assert rec.statuses == [LoaderStatus.IDLE]

    def test_unsubscribe(self, loader):
        rec = Recorder()
        unsubscribe = loader.subscribe(rec)
        unsubscribe()
        unsubscribe()

        loader.start()
        assert rec.states == []
        assert loader.subscriber_count == 0

    def test_raising_subscriber_does_not_stop_others(self, loader, caplog):
        def broken(state):
            raise RuntimeError("render failed")

        rec = Recorder()
        loader.subscribe(broken)
        loader.subscribe(rec)

        loader.start()
        assert rec.statuses == [LoaderStatus.LOADING]
        assert "subscriber raised" in caplog.text

    def test_reentrant_calls_are_queued(self, loader):
        rec = Recorder()

        def completes_on_first_update(state):
            if state.status is LoaderStatus.STREAMING:
                loader.complete({"final": True})

        loader.subscribe(completes_on_first_update)
        loader.subscribe(rec)

        loader.start()
        loader.update({"partial": True})

        # The second subscriber sees streaming before complete
        assert rec.statuses == [
            LoaderStatus.LOADING,
            LoaderStatus.STREAMING,
            LoaderStatus.COMPLETE,
        ]

    def test_buffered_mode_notifies_only_start_and_complete(self, clock):
        loader = ProgressiveLoader(LoaderConfig(streaming_enabled=False), clock=clock)
        rec = Recorder()
        loader.subscribe(rec)

        loader.start()
        loader.update({"a": 1})
        loader.update({"b": 2})
        loader.complete({"c": 3})

        assert rec.statuses == [LoaderStatus.LOADING, LoaderStatus.COMPLETE]
        assert dict(rec.states[-1].data) == {"a": 1, "b": 2, "c": 3}

    def test_buffered_mode_stays_silent_past_the_timeout(self, clock):
        loader = ProgressiveLoader(LoaderConfig(streaming_enabled=False), clock=clock)
        rec = Recorder()
        loader.subscribe(rec)

        loader.start()
        loader.update({"colors": [1]})
        clock.advance(3000)

        assert not loader.should_show_skeleton()
        assert not loader.refresh()

        loader.complete({})
        assert rec.statuses == [LoaderStatus.LOADING, LoaderStatus.COMPLETE]


class TestDestroy:
    """destroy() silences everything."""

    def test_no_notifications_after_destroy(self, loader):
        rec = Recorder()
        loader.subscribe(rec)
        loader.start()
        loader.destroy()

        loader.update({"a": 1})
        loader.complete({})
        loader.destroy()

        assert rec.statuses == [LoaderStatus.LOADING]
        assert loader.destroyed
        assert not loader.should_show_skeleton()
        assert loader.subscriber_count == 0

    def test_subscribe_after_destroy_is_noop(self, loader):
        loader.destroy()
        rec = Recorder()
        unsubscribe = loader.subscribe(rec, emit_current=True)
        unsubscribe()
        assert rec.states == []

    def test_destroy_from_subscriber_stops_remaining_callbacks(self, loader):
        rec = Recorder()
        loader.subscribe(lambda s: loader.destroy())
        loader.subscribe(rec)

        loader.start()
        assert rec.states == []
        assert loader.destroyed
