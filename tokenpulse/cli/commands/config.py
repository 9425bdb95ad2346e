# tokenpulse/cli/commands/config.py
"""
Config command.

Usage:
    tokenpulse config                  # resolved config (defaults + $TOKENPULSE_CONFIG)
    tokenpulse config --path my.yaml   # resolved config with a specific user file
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml

from tokenpulse.cli.ui import ui
from tokenpulse.config import load_config, resolve_config_path
from tokenpulse.exceptions import ConfigError


def command(
    path: Optional[Path] = typer.Option(
        None,
        "--path",
        "-p",
        help="User config file to merge over the defaults.",
    ),
) -> None:
    """Show the resolved configuration as YAML."""
    config_path = resolve_config_path(path)
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        ui.error(str(exc))
        raise typer.Exit(1)

    rendered = yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False)
    typer.echo(rendered.rstrip())
