# tokenpulse/realtime/registry.py
"""
Connection registry for realtime broadcast.

One registry instance is created per application (or per test) and handed
to whoever needs it; there is no module-level connection set.

Lifecycle:
    registry = ConnectionRegistry(max_connections=1000)
    conn_id = registry.open(connection)      # on client connect
    registry.broadcast({"type": "heartbeat"})
    registry.close(conn_id)                   # on client disconnect
    registry.close_all()                      # on shutdown

A connection whose send() raises is considered dead and pruned during the
broadcast that hit the failure.
"""

from __future__ import annotations

import asyncio
import itertools
import json
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from tokenpulse.exceptions import RegistryError, RegistryFullError
from tokenpulse.logging import REALTIME, get_logger

logger = get_logger(__name__)


def format_sse(message: Any) -> str:
    """Encode a message as a server-sent-events data frame."""
    if not isinstance(message, str):
        message = json.dumps(message, separators=(",", ":"), default=str)
    return f"data: {message}\n\n"


@runtime_checkable
class Connection(Protocol):
    """Anything that can receive an encoded frame."""

    def send(self, message: str) -> None:
        """Deliver one frame. Raise to signal the connection is dead."""
        ...


class ConnectionClosedError(RegistryError):
    """Raised by a connection that can no longer accept frames."""


class QueueConnection:
    """
    asyncio.Queue-backed connection for streaming HTTP responses.

    send() never blocks: a full queue means the client is not reading, and
    the connection reports itself dead so the registry prunes it.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: str) -> None:
        if self._closed:
            raise ConnectionClosedError("connection closed")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull as exc:
            self._closed = True
            raise ConnectionClosedError("client is not keeping up") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    async def receive(self) -> Optional[str]:
        """Next frame, or None once the connection is closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    async def frames(self):
        """Async iterator over frames until close()."""
        while True:
            frame = await self.receive()
            if frame is None:
                return
            yield frame


class ConnectionRegistry:
    """
    Bounded set of open connections with broadcast.

    Not thread-safe; use from a single event loop.
    """

    def __init__(self, max_connections: int = 1000) -> None:
        if max_connections < 1:
            raise ValueError("max_connections must be at least 1")
        self._max = max_connections
        self._connections: Dict[int, Connection] = {}
        self._ids = itertools.count(1)

    @property
    def count(self) -> int:
        return len(self._connections)

    @property
    def max_connections(self) -> int:
        return self._max

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn_id: object) -> bool:
        return conn_id in self._connections

    def open(self, connection: Connection) -> int:
        """
        Register a connection.

        Returns:
            Connection id to pass to close().

        Raises:
            RegistryFullError: If max_connections are already open
        """
        if len(self._connections) >= self._max:
            raise RegistryFullError(
                f"Connection limit reached ({self._max}); refusing new connection"
            )
        conn_id = next(self._ids)
        self._connections[conn_id] = connection
        logger.debug(f"{REALTIME} opened connection {conn_id} ({self.count} open)")
        return conn_id

    def close(self, conn_id: int) -> bool:
        """Remove a connection. Returns False if it was not registered."""
        connection = self._connections.pop(conn_id, None)
        if connection is None:
            return False
        _close_quietly(connection)
        logger.debug(f"{REALTIME} closed connection {conn_id} ({self.count} open)")
        return True

    def close_all(self) -> int:
        closed = 0
        for conn_id in list(self._connections):
            if self.close(conn_id):
                closed += 1
        return closed

    def send(self, conn_id: int, message: Any) -> bool:
        """Send to a single connection, pruning it on failure."""
        connection = self._connections.get(conn_id)
        if connection is None:
            return False
        try:
            connection.send(format_sse(message))
        except Exception as exc:
            logger.warning(f"{REALTIME} send to {conn_id} failed ({exc}); pruning")
            self.close(conn_id)
            return False
        return True

    def broadcast(self, message: Any) -> int:
        """
        Send one frame to every open connection.

        Returns:
            Number of connections that accepted the frame.
        """
        frame = format_sse(message)
        dead: List[int] = []
        delivered = 0

        for conn_id, connection in list(self._connections.items()):
            try:
                connection.send(frame)
                delivered += 1
            except Exception as exc:
                logger.warning(f"{REALTIME} broadcast to {conn_id} failed ({exc}); pruning")
                dead.append(conn_id)

        for conn_id in dead:
            self.close(conn_id)

        return delivered


def _close_quietly(connection: Connection) -> None:
    close = getattr(connection, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception:
        logger.debug(f"{REALTIME} error while closing connection", exc_info=True)


__all__ = [
    "Connection",
    "ConnectionClosedError",
    "ConnectionRegistry",
    "QueueConnection",
    "format_sse",
]
