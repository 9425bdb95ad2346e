# tokenpulse/logging/logger.py
"""
Logger factory.

All modules obtain their logger through get_logger(__name__) so that
everything lives under the "tokenpulse" namespace and can be configured
in one place.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "tokenpulse"

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the tokenpulse namespace.

    Module names already inside the package are used as-is; anything else
    is nested below the root logger.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Install a single stream handler on the package root logger.

    Safe to call repeatedly; only the level changes after the first call.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root.setLevel(level)

    if not any(getattr(h, "_tokenpulse", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._tokenpulse = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root
