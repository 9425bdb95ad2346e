# tokenpulse/api/schemas.py
"""API request and response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str
    connections: int


class CompareRequest(BaseModel):
    """Two snapshots to compare, in any shape TokenSet.from_dict accepts."""

    old: dict[str, Any] = Field(..., description="Previous snapshot")
    new: dict[str, Any] = Field(..., description="Current snapshot")
    changelog: bool = Field(default=False, description="Also render a markdown changelog")

    model_config = ConfigDict(extra="forbid")


class CompareResponse(BaseModel):
    diff: dict[str, Any]
    similarity: int
    changelog: str | None = None


class BroadcastResponse(BaseModel):
    success: bool
    connections: int
    delivered: int
