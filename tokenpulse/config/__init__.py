# tokenpulse/config/__init__.py
"""
Configuration for tokenpulse.

Usage:
    >>> from tokenpulse.config import load_config
    >>> config = load_config("tokenpulse.yaml")
    >>> config.loader.skeleton_timeout
    2000.0
"""

from .loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    load_config,
    load_config_dict,
    resolve_config_path,
)
from .schema import LoaderConfig, LoggingConfig, RealtimeConfig, TokenPulseConfig

__all__ = [
    # Main config
    "TokenPulseConfig",
    "load_config",
    "load_config_dict",
    "resolve_config_path",
    # Sub-configs
    "LoaderConfig",
    "RealtimeConfig",
    "LoggingConfig",
    # Constants
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
]
