# tokenpulse/api/__init__.py
"""
HTTP API for tokenpulse.

Usage:
    uvicorn --factory tokenpulse.api.app:create_app
"""

from tokenpulse.api.app import create_app

__all__ = ["create_app"]
