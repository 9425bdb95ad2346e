# tokenpulse/core/__init__.py
"""Shared primitives."""

from .clock import Clock, ManualClock, SystemClock

__all__ = ["Clock", "SystemClock", "ManualClock"]
