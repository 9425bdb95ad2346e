# tokenpulse/session.py
"""
Scan session: wires one producer to one loader.

A ScanSession owns a ProgressiveLoader for a single scan, drains an async
stream of ProgressEvents into it, keeps skeleton timers running, fans state
out to a ConnectionRegistry when one is injected, and keeps the final
token snapshot around so it can be diffed against an earlier scan.

Cancellation of the producer always ends as fail() followed by destroy(),
never as a silently stalled loader.

Usage:
    async with ScanSession(registry=registry, session_id="example.com") as session:
        state = await session.run(scanner.events())

    if state.status is LoaderStatus.COMPLETE:
        diff = session.compare_with(previous_snapshot)
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from typing import Any, AsyncIterable, Mapping, Optional

from tokenpulse.config.schema import LoaderConfig
from tokenpulse.core.clock import Clock
from tokenpulse.diff.engine import SnapshotLike, compute_diff
from tokenpulse.diff.models import TokenDiff
from tokenpulse.exceptions import ProducerError, ScanCancelledError
from tokenpulse.loader.loader import ProgressiveLoader
from tokenpulse.loader.scheduler import SkeletonScheduler
from tokenpulse.loader.transitions import EventKind, as_exception
from tokenpulse.logging import SESSION, get_logger
from tokenpulse.models.progress import LoaderStatus, ProgressiveState, ProgressMeta
from tokenpulse.models.tokens import TokenSet
from tokenpulse.realtime.registry import ConnectionRegistry
from tokenpulse.validation.base import ValidationResult, resolve_validator

logger = get_logger(__name__)

# Key of the final payload that carries the token snapshot
TOKENS_KEY = "tokens"


@dataclass(frozen=True)
class ProgressEvent:
    """One item of the producer's progress stream."""

    kind: EventKind
    payload: Optional[Mapping[str, Any]] = None
    meta: Optional[ProgressMeta] = None
    error: Any = None

    @classmethod
    def update(
        cls,
        payload: Optional[Mapping[str, Any]] = None,
        meta: "ProgressMeta | Mapping[str, Any] | None" = None,
    ) -> "ProgressEvent":
        return cls(EventKind.UPDATE, payload=payload, meta=ProgressMeta.coerce(meta))

    @classmethod
    def complete(cls, payload: Optional[Mapping[str, Any]] = None) -> "ProgressEvent":
        return cls(EventKind.COMPLETE, payload=payload)

    @classmethod
    def fail(cls, error: Any) -> "ProgressEvent":
        return cls(EventKind.FAIL, error=error)


class ScanSession:
    """
    Runs one scan's progress stream through a ProgressiveLoader.

    Args:
        config: Loader timing, ignored when `loader` is given
        loader: Pre-built loader (must be idle)
        registry: Optional realtime registry to broadcast state to
        validator: Optional documentation validator, resolved once here
        clock: Clock for a loader built by the session
        session_id: Identifier used in broadcasts and logs
    """

    def __init__(
        self,
        *,
        config: LoaderConfig | None = None,
        loader: ProgressiveLoader | None = None,
        registry: ConnectionRegistry | None = None,
        validator: Any = None,
        clock: Clock | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.loader = loader or ProgressiveLoader(config, clock=clock, name=self.session_id)
        self._registry = registry
        self._validator = resolve_validator(validator)
        self._scheduler = SkeletonScheduler(self.loader)
        self._snapshot: Optional[TokenSet] = None
        self.validation: Optional[ValidationResult] = None

        if registry is not None:
            self.loader.subscribe(self._broadcast)

    # ------------------------------------------------------------------
    # context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "ScanSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None and not self.loader.get_state().is_terminal:
            self.loader.fail(exc if exc is not None else ProducerError("session aborted"))
        self.close()

    # ------------------------------------------------------------------
    # driving the loader
    # ------------------------------------------------------------------

    async def run(self, events: AsyncIterable[ProgressEvent]) -> ProgressiveState:
        """
        Drain a progress stream into the loader.

        Producer exceptions end the session in the error state; they are
        recorded, not re-raised. Task cancellation maps to cancel() and is
        re-raised.

        Returns:
            The loader state after the stream ended.
        """
        self.loader.start()
        self._scheduler.attach()

        try:
            async for event in events:
                self.apply(event)
                if self.loader.get_state().is_terminal:
                    break
            else:
                if not self.loader.get_state().is_terminal:
                    self.loader.fail(
                        ProducerError("progress stream ended without completion")
                    )
        except asyncio.CancelledError:
            self.cancel("scan task cancelled")
            raise
        except Exception as exc:
            logger.warning(f"{SESSION} {self.session_id}: producer raised {exc!r}")
            self.loader.fail(exc)
        finally:
            self._scheduler.cancel()
            # Finalize the producer now rather than at garbage collection
            aclose = getattr(events, "aclose", None)
            if aclose is not None:
                await aclose()

        return self.loader.get_state()

    def apply(self, event: ProgressEvent) -> None:
        """Forward one producer event to the loader."""
        if event.kind is EventKind.UPDATE:
            self.loader.update(event.payload, event.meta)
        elif event.kind is EventKind.COMPLETE:
            self.loader.complete(event.payload)
            self._on_complete()
        elif event.kind is EventKind.FAIL:
            self.loader.fail(as_exception(event.error))
        else:
            logger.debug(f"{SESSION} {self.session_id}: ignoring {event.kind.value} event")

    def cancel(self, reason: str = "scan cancelled") -> None:
        """Producer-side abort: fail() then destroy()."""
        self.loader.fail(ScanCancelledError(reason))
        self.close()

    def close(self) -> None:
        self._scheduler.cancel()
        self.loader.destroy()

    # ------------------------------------------------------------------
    # results
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Optional[TokenSet]:
        """Token snapshot of a completed scan, if the result carried one."""
        return self._snapshot

    def compare_with(self, previous: SnapshotLike) -> TokenDiff:
        """
        Diff an earlier snapshot against this session's result.

        Raises:
            ProducerError: If the session has no completed snapshot
        """
        if self._snapshot is None:
            raise ProducerError(f"session {self.session_id} has no completed token snapshot")
        return compute_diff(previous, self._snapshot)

    def _on_complete(self) -> None:
        state = self.loader.get_state()
        if state.status is not LoaderStatus.COMPLETE or state.data is None:
            return

        tokens = state.data.get(TOKENS_KEY)
        if isinstance(tokens, TokenSet):
            self._snapshot = tokens
        elif isinstance(tokens, Mapping):
            self._snapshot = TokenSet.from_dict(tokens)

        if self._snapshot is not None:
            self.validation = self._validator.validate(self._snapshot)
            if self.validation.is_validated:
                logger.info(
                    f"{SESSION} {self.session_id}: validated against "
                    f"{self.validation.source} "
                    f"(confidence {self.validation.confidence_after:.0f})"
                )

    def _broadcast(self, state: ProgressiveState) -> None:
        if self._registry is None:
            return
        self._registry.broadcast(
            {
                "type": "scan_progress",
                "session": self.session_id,
                "skeleton": self.loader.should_show_skeleton(),
                "state": state.to_dict(),
            }
        )


__all__ = [
    "TOKENS_KEY",
    "ProgressEvent",
    "ScanSession",
]
