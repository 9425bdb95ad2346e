# tokenpulse/loader/estimate.py
"""
Completion-time estimate from phase weights.

Each known phase carries the share of total scan time it usually takes.
Finished phases count fully, the current phase counts half, and the total
is extrapolated from elapsed time:

    estimate = elapsed / (sum(finished weights) + 0.5 * current weight)
"""

from __future__ import annotations

from typing import Dict

from tokenpulse.models.progress import PHASE_ORDER, ProgressPhase

PHASE_WEIGHTS: Dict[str, float] = {
    ProgressPhase.INITIALIZING.value: 0.05,
    ProgressPhase.CSS_COLLECTION.value: 0.25,
    ProgressPhase.TOKEN_GENERATION.value: 0.35,
    ProgressPhase.ANALYSIS.value: 0.20,
    ProgressPhase.AI_PROCESSING.value: 0.10,
    ProgressPhase.COMPLETE.value: 0.05,
}

# Used when the phase is unknown or nothing has been weighed yet
FALLBACK_MULTIPLIER = 20


def estimate_completion(phase: str, elapsed_ms: float) -> float:
    """
    Estimated total scan duration in milliseconds.

    Unknown phases fall back to elapsed * FALLBACK_MULTIPLIER.
    """
    if phase not in PHASE_WEIGHTS:
        return float(elapsed_ms * FALLBACK_MULTIPLIER)

    current_index = PHASE_ORDER.index(phase)
    weight = sum(PHASE_WEIGHTS[p] for p in PHASE_ORDER[:current_index])
    weight += PHASE_WEIGHTS[phase] * 0.5

    if weight <= 0:
        return float(elapsed_ms * FALLBACK_MULTIPLIER)

    return float(round(elapsed_ms / weight))


def phase_step(phase: str) -> int:
    """1-based position of a known phase, 0 for unknown phases."""
    try:
        return PHASE_ORDER.index(phase) + 1
    except ValueError:
        return 0
