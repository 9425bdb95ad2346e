# tokenpulse/cli/commands/__init__.py
"""CLI commands."""

from tokenpulse.cli.commands import config, diff, serve

__all__ = [
    "config",
    "diff",
    "serve",
]
