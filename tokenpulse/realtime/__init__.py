# tokenpulse/realtime/__init__.py
"""Realtime fan-out of scan progress to connected clients."""

from .registry import (
    Connection,
    ConnectionClosedError,
    ConnectionRegistry,
    QueueConnection,
    format_sse,
)

__all__ = [
    "Connection",
    "ConnectionClosedError",
    "ConnectionRegistry",
    "QueueConnection",
    "format_sse",
]
