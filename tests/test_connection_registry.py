# tests/test_connection_registry.py
"""Tests for tokenpulse.realtime.registry."""

import asyncio
import json

import pytest

from tokenpulse.exceptions import RegistryFullError
from tokenpulse.realtime.registry import (
    ConnectionClosedError,
    ConnectionRegistry,
    QueueConnection,
    format_sse,
)


class RecordingConnection:
    """Connection that keeps every frame it receives."""

    def __init__(self):
        self.frames = []
        self.closed = False

    def send(self, message: str) -> None:
        self.frames.append(message)

    def close(self) -> None:
        self.closed = True

    def messages(self):
        return [json.loads(f[len("data: "):]) for f in self.frames]


class DeadConnection:
    """Connection whose client went away."""

    def send(self, message: str) -> None:
        raise ConnectionResetError("client gone")


class TestFormatSse:
    def test_dict_is_compact_json_frame(self):
        assert format_sse({"type": "ping", "n": 1}) == 'data: {"type":"ping","n":1}\n\n'

    def test_string_passes_through(self):
        assert format_sse("hello") == "data: hello\n\n"


class TestRegistryLifecycle:
    """open / close / bounds."""

    def test_open_returns_increasing_ids(self):
        registry = ConnectionRegistry()
        first = registry.open(RecordingConnection())
        second = registry.open(RecordingConnection())

        assert (first, second) == (1, 2)
        assert registry.count == 2
        assert first in registry

    def test_bound_is_enforced(self):
        registry = ConnectionRegistry(max_connections=1)
        registry.open(RecordingConnection())

        with pytest.raises(RegistryFullError):
            registry.open(RecordingConnection())

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            ConnectionRegistry(max_connections=0)

    def test_close_closes_connection(self):
        registry = ConnectionRegistry()
        conn = RecordingConnection()
        conn_id = registry.open(conn)

        assert registry.close(conn_id)
        assert conn.closed
        assert not registry.close(conn_id)
        assert len(registry) == 0

    def test_close_all(self):
        registry = ConnectionRegistry()
        conns = [RecordingConnection() for _ in range(3)]
        for conn in conns:
            registry.open(conn)

        assert registry.close_all() == 3
        assert registry.count == 0
        assert all(c.closed for c in conns)

    def test_separate_registries_are_isolated(self):
        a = ConnectionRegistry()
        b = ConnectionRegistry()
        a.open(RecordingConnection())
        assert b.count == 0


class TestBroadcast:
    """Fan-out and dead-entry pruning."""

    def test_broadcast_reaches_everyone(self):
        registry = ConnectionRegistry()
        conns = [RecordingConnection(), RecordingConnection()]
        for conn in conns:
            registry.open(conn)

        delivered = registry.broadcast({"type": "scan_progress"})

        assert delivered == 2
        assert all(c.messages() == [{"type": "scan_progress"}] for c in conns)

    def test_dead_connection_is_pruned(self):
        registry = ConnectionRegistry()
        alive = RecordingConnection()
        registry.open(alive)
        dead_id = registry.open(DeadConnection())

        assert registry.broadcast({"type": "heartbeat"}) == 1
        assert dead_id not in registry
        assert registry.count == 1

    def test_send_prunes_on_failure(self):
        registry = ConnectionRegistry()
        dead_id = registry.open(DeadConnection())

        assert not registry.send(dead_id, {"type": "x"})
        assert not registry.send(999, {"type": "x"})
        assert registry.count == 0


class TestQueueConnection:
    """asyncio-backed connection used by the stream endpoint."""

    def test_frames_until_close(self):
        async def scenario():
            conn = QueueConnection(maxsize=10)
            conn.send("a")
            conn.send("b")
            conn.close()
            return [frame async for frame in conn.frames()]

        assert asyncio.run(scenario()) == ["a", "b"]

    def test_full_queue_marks_connection_dead(self):
        async def scenario():
            conn = QueueConnection(maxsize=1)
            conn.send("a")
            with pytest.raises(ConnectionClosedError):
                conn.send("b")
            return conn.closed

        assert asyncio.run(scenario())

    def test_send_after_close_raises(self):
        async def scenario():
            conn = QueueConnection()
            conn.close()
            with pytest.raises(ConnectionClosedError):
                conn.send("late")

        asyncio.run(scenario())

    def test_registry_prunes_slow_client(self):
        async def scenario():
            registry = ConnectionRegistry()
            registry.open(QueueConnection(maxsize=1))
            first = registry.broadcast({"n": 1})
            second = registry.broadcast({"n": 2})
            return first, second, registry.count

        assert asyncio.run(scenario()) == (1, 0, 0)
