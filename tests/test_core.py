# tests/test_core.py
"""Tests for clocks and logging helpers."""

import logging

import pytest

from tokenpulse.core.clock import Clock, ManualClock, SystemClock
from tokenpulse.logging import LOADER, configure_logging, get_logger


class TestClocks:
    def test_manual_clock(self):
        clock = ManualClock(start=100)
        assert clock.now() == 100
        assert clock.advance(50) == 150
        clock.set(400)
        assert clock.now() == 400

    def test_manual_clock_never_goes_back(self):
        clock = ManualClock(start=100)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(50)

    def test_system_clock_is_monotonic(self):
        clock = SystemClock()
        first = clock.now()
        assert clock.now() >= first
        assert isinstance(clock, Clock)


class TestLogging:
    def test_loggers_live_under_package_namespace(self):
        assert get_logger("tokenpulse.diff.engine").name == "tokenpulse.diff.engine"
        assert get_logger("plugins.custom").name == "tokenpulse.plugins.custom"

    def test_configure_logging_installs_one_handler(self):
        configure_logging("DEBUG")
        root = configure_logging("warning")

        handlers = [h for h in root.handlers if getattr(h, "_tokenpulse", False)]
        assert len(handlers) == 1
        assert root.level == logging.WARNING

    def test_tags(self):
        assert LOADER == "[LOADER]"
