# tokenpulse/api/routes/health.py
"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tokenpulse.api.dependencies import get_registry, get_tokenpulse_version
from tokenpulse.api.schemas import HealthResponse
from tokenpulse.realtime.registry import ConnectionRegistry

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(registry: ConnectionRegistry = Depends(get_registry)) -> HealthResponse:
    """Server status, version, and open realtime connections."""
    return HealthResponse(
        status="healthy",
        version=get_tokenpulse_version(),
        connections=registry.count,
    )
