# tokenpulse/exceptions.py
"""
Exception hierarchy for tokenpulse.

Only contract violations and configuration problems are raised. Producer
failures travel as data inside ProgressiveState.error, and malformed
snapshot data is normalized by the diff engine instead of raised.
"""

from __future__ import annotations


class TokenPulseError(Exception):
    """Base class for all tokenpulse errors."""


class ConfigError(TokenPulseError):
    """Configuration file missing, unreadable, or invalid."""


class SnapshotError(TokenPulseError):
    """A snapshot argument violates the diff engine contract (e.g. None)."""


class ProducerError(TokenPulseError):
    """
    A failure reported by the external scanner.

    Used to wrap failure payloads that are not already exceptions, such as
    an error string carried by a progress event.
    """


class ScanCancelledError(ProducerError):
    """The producer side aborted the scan."""


class RegistryError(TokenPulseError):
    """Connection registry misuse."""


class RegistryFullError(RegistryError):
    """The connection registry reached its configured bound."""


__all__ = [
    "TokenPulseError",
    "ConfigError",
    "SnapshotError",
    "ProducerError",
    "ScanCancelledError",
    "RegistryError",
    "RegistryFullError",
]
