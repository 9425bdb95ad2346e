# tokenpulse/api/dependencies.py
"""Request-scoped accessors for per-app state."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from fastapi import Request

from tokenpulse.config.schema import TokenPulseConfig
from tokenpulse.realtime.registry import ConnectionRegistry


def get_tokenpulse_version() -> str:
    try:
        return version("tokenpulse")
    except PackageNotFoundError:
        return "0.0.0+local"


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry


def get_config(request: Request) -> TokenPulseConfig:
    return request.app.state.config
