# tokenpulse/api/routes/versions.py
"""Token version comparison endpoint."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from tokenpulse.api.schemas import CompareRequest, CompareResponse
from tokenpulse.diff import compute_diff, generate_changelog, similarity_score
from tokenpulse.logging import API, get_logger
from tokenpulse.models.tokens import TokenSet

logger = get_logger(__name__)

router = APIRouter(prefix="/versions", tags=["versions"])


@router.post("/compare", response_model=CompareResponse)
async def compare(request: CompareRequest) -> CompareResponse:
    """
    Compare two token snapshots.

    The diff is recomputed on every call; nothing is stored.
    """
    try:
        old = TokenSet.from_dict(request.old)
        new = TokenSet.from_dict(request.new)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Invalid snapshot: {exc}") from exc

    diff = compute_diff(old, new)
    logger.info(f"{API} compare: {diff}")

    return CompareResponse(
        diff=diff.to_dict(),
        similarity=similarity_score(old, new),
        changelog=generate_changelog(diff) if request.changelog else None,
    )
