# tokenpulse/__init__.py
"""
tokenpulse: progressive scan delivery and design token diffs.

Two cores:
- ProgressiveLoader: skeleton-vs-data state machine for scan results that
  arrive in pieces
- compute_diff: categorized comparison of two design token snapshots

Usage:
    from tokenpulse import ProgressiveLoader, LoaderConfig, compute_diff

    loader = ProgressiveLoader(LoaderConfig.for_scans())
    loader.subscribe(render)
    loader.start()

    diff = compute_diff(old_snapshot, new_snapshot)
"""

from tokenpulse.config import LoaderConfig, TokenPulseConfig, load_config
from tokenpulse.core import Clock, ManualClock, SystemClock
from tokenpulse.diff import (
    ChangeType,
    TokenChange,
    TokenDiff,
    TokenDiffer,
    compute_diff,
    generate_changelog,
    similarity_score,
)
from tokenpulse.exceptions import (
    ConfigError,
    ProducerError,
    RegistryFullError,
    ScanCancelledError,
    SnapshotError,
    TokenPulseError,
)
from tokenpulse.loader import ProgressiveLoader, SkeletonScheduler
from tokenpulse.models import (
    LoaderStatus,
    ProgressInfo,
    ProgressiveState,
    ProgressMeta,
    TokenEntry,
    TokenSet,
)
from tokenpulse.realtime import ConnectionRegistry
from tokenpulse.session import ProgressEvent, ScanSession
from tokenpulse.validation import (
    DocumentationValidator,
    NoOpValidator,
    ReferenceDocsValidator,
)

__all__ = [
    # Loader
    "ProgressiveLoader",
    "SkeletonScheduler",
    "LoaderStatus",
    "ProgressMeta",
    "ProgressInfo",
    "ProgressiveState",
    # Diff
    "TokenEntry",
    "TokenSet",
    "ChangeType",
    "TokenChange",
    "TokenDiff",
    "TokenDiffer",
    "compute_diff",
    "generate_changelog",
    "similarity_score",
    # Session / realtime
    "ScanSession",
    "ProgressEvent",
    "ConnectionRegistry",
    # Validation
    "DocumentationValidator",
    "NoOpValidator",
    "ReferenceDocsValidator",
    # Config
    "LoaderConfig",
    "TokenPulseConfig",
    "load_config",
    # Time
    "Clock",
    "SystemClock",
    "ManualClock",
    # Errors
    "TokenPulseError",
    "ConfigError",
    "SnapshotError",
    "ProducerError",
    "ScanCancelledError",
    "RegistryFullError",
]
