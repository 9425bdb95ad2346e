# tokenpulse/cli/ui/__init__.py
"""
CLI UI components.

Usage:
    from tokenpulse.cli.ui import ui

    ui.header("My Command")
    ui.success("Done!")
"""

from __future__ import annotations

from .console import console
from .output import OutputMixin


class UI(OutputMixin):
    """Unified UI helpers built on Rich."""


# Singleton instance
ui = UI()

__all__ = [
    "ui",
    "UI",
    "console",
]
