# tokenpulse/api/routes/realtime.py
"""
Realtime endpoints.

GET  /realtime/stream     server-sent events, one connection per client
POST /realtime/broadcast  push a message to every open stream
"""

from __future__ import annotations

import time
from typing import Any, AsyncIterator

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import StreamingResponse

from tokenpulse.api.dependencies import get_config, get_registry
from tokenpulse.api.schemas import BroadcastResponse
from tokenpulse.config.schema import TokenPulseConfig
from tokenpulse.exceptions import RegistryFullError
from tokenpulse.logging import REALTIME, get_logger
from tokenpulse.realtime.registry import ConnectionRegistry, QueueConnection

logger = get_logger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.get("/stream")
async def stream(
    registry: ConnectionRegistry = Depends(get_registry),
    config: TokenPulseConfig = Depends(get_config),
) -> StreamingResponse:
    """Open a server-sent-events stream of broadcast messages."""
    connection = QueueConnection(maxsize=config.realtime.queue_size)
    try:
        conn_id = registry.open(connection)
    except RegistryFullError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    registry.send(conn_id, {"type": "connected", "timestamp": int(time.time() * 1000)})

    async def frames() -> AsyncIterator[str]:
        try:
            async for frame in connection.frames():
                yield frame
        finally:
            registry.close(conn_id)

    return StreamingResponse(frames(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/broadcast", response_model=BroadcastResponse)
async def broadcast(
    message: dict[str, Any] = Body(...),
    registry: ConnectionRegistry = Depends(get_registry),
) -> BroadcastResponse:
    """Broadcast a message to every open stream. The message needs a `type`."""
    if not message.get("type"):
        raise HTTPException(status_code=400, detail="Missing type field")

    delivered = registry.broadcast(message)
    logger.info(f"{REALTIME} broadcast {message['type']!r} to {delivered} connection(s)")

    return BroadcastResponse(success=True, connections=registry.count, delivered=delivered)
