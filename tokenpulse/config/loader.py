# tokenpulse/config/loader.py
"""
Configuration loader for tokenpulse.

Responsibilities:
- Load the bundled default config
- Load a user config (optional) and merge it section by section
- Expand ${ENV_VAR} placeholders
- Validate via schema
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tokenpulse.config.schema import TokenPulseConfig
from tokenpulse.exceptions import ConfigError
from tokenpulse.logging import CONFIG, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"

CONFIG_ENV_VAR = "TOKENPULSE_CONFIG"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    return _expand_env(data)


def _snake_keys(data: dict) -> dict:
    """Section option names may be camelCase in user files; defaults are snake_case."""
    out = {}
    for key, value in data.items():
        if isinstance(key, str):
            key = _CAMEL_BOUNDARY.sub(r"_\1", key).lower()
        out[key] = _snake_keys(value) if isinstance(value, dict) else value
    return out


def _merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def resolve_config_path(explicit: str | Path | None = None) -> Path | None:
    """Explicit path first, then $TOKENPULSE_CONFIG, else None."""
    if explicit:
        return Path(explicit)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return None


def load_config_dict(user_config_path: str | Path | None = None) -> dict:
    """
    Load the merged (defaults + user) config as a plain dict.

    Precedence:
    - defaults
    - user config (overrides defaults, section by section)
    """
    logger.debug(f"{CONFIG} Loading default config from {DEFAULT_CONFIG_PATH}")
    data = _load_yaml(DEFAULT_CONFIG_PATH)

    if user_config_path:
        path = Path(user_config_path)
        logger.debug(f"{CONFIG} Loading user config from {path}")
        data = _merge(data, _snake_keys(_load_yaml(path)))

    return data


def load_config(user_config_path: str | Path | None = None) -> TokenPulseConfig:
    """
    Load and validate tokenpulse configuration.

    Raises:
        ConfigError: If a file is missing, unreadable, or fails validation
    """
    data = load_config_dict(user_config_path)
    try:
        return TokenPulseConfig.from_dict(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
