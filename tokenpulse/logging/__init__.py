# tokenpulse/logging/__init__.py
"""Logging helpers for tokenpulse."""

from .logger import configure_logging, get_logger
from .tags import API, CLI, CONFIG, DIFF, LOADER, REALTIME, SESSION, VALIDATION

__all__ = [
    "get_logger",
    "configure_logging",
    "API",
    "CLI",
    "CONFIG",
    "DIFF",
    "LOADER",
    "REALTIME",
    "SESSION",
    "VALIDATION",
]
