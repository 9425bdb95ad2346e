# tokenpulse/cli/__init__.py
"""
Main tokenpulse CLI module.
"""

from tokenpulse.cli.cli import app

__all__ = ["app"]
