# tokenpulse/cli/commands/serve.py
"""
API server command.

Usage:
    tokenpulse serve              # Start on default port 8000
    tokenpulse serve --port 3000  # Custom port
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from tokenpulse.cli.ui import ui
from tokenpulse.config import load_config, resolve_config_path
from tokenpulse.exceptions import ConfigError


def command(
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        "-h",
        help="Host to bind to.",
    ),
    port: int = typer.Option(
        8000,
        "--port",
        "-p",
        help="Port to listen on.",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="User config file.",
    ),
) -> None:
    """
    Start the tokenpulse API server.

    API Documentation:
        Once running, visit http://localhost:8000/docs for interactive docs.
    """
    from tokenpulse.api import create_app

    try:
        config = load_config(resolve_config_path(config_path))
    except ConfigError as exc:
        ui.error(str(exc))
        raise typer.Exit(1)

    ui.header("tokenpulse API Server", f"http://{host}:{port}")
    ui.info(f"API docs: http://{host}:{port}/docs")
    ui.info("Press Ctrl+C to stop")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=config.logging.level.lower(),
    )
