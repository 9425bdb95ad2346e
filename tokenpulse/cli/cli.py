# tokenpulse/cli/cli.py
"""
Main tokenpulse CLI.
"""

from __future__ import annotations

import typer

from tokenpulse.cli.commands import config, diff, serve
from tokenpulse.logging import configure_logging

app = typer.Typer(
    help="tokenpulse: progressive scan delivery and design token diffs",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging("DEBUG" if verbose else "WARNING")


app.command("diff")(diff.command)
app.command("config")(config.command)
app.command("serve")(serve.command)
