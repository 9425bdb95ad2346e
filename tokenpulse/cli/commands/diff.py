# tokenpulse/cli/commands/diff.py
"""
Snapshot diff command.

Usage:
    tokenpulse diff old.json new.json              # summary table
    tokenpulse diff old.json new.json --changelog  # markdown changelog
    tokenpulse diff old.json new.json --json       # machine-readable diff
"""

from __future__ import annotations

import json
from pathlib import Path

import typer

from tokenpulse.cli.ui import ui
from tokenpulse.diff import compute_diff, generate_changelog, similarity_score
from tokenpulse.logging import CLI, get_logger
from tokenpulse.models.tokens import TokenSet

logger = get_logger(__name__)


def _load_snapshot(path: Path) -> TokenSet:
    if not path.exists():
        ui.error(f"Snapshot not found: {path}")
        raise typer.Exit(1)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        ui.error(f"{path} is not valid JSON: {exc}")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        ui.error(f"{path} must contain a JSON object")
        raise typer.Exit(1)
    return TokenSet.from_dict(data)


def command(
    old: Path = typer.Argument(..., help="Previous snapshot (JSON)."),
    new: Path = typer.Argument(..., help="Current snapshot (JSON)."),
    changelog: bool = typer.Option(
        False,
        "--changelog",
        "-c",
        help="Print a markdown changelog instead of the table.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the diff as JSON.",
    ),
) -> None:
    """
    Compare two token snapshots.

    Examples:
        tokenpulse diff v1.json v2.json
        tokenpulse diff v1.json v2.json --changelog > CHANGES.md
    """
    old_set = _load_snapshot(old)
    new_set = _load_snapshot(new)

    diff = compute_diff(old_set, new_set)
    logger.debug(f"{CLI} diff {old} -> {new}: {diff}")

    if as_json:
        typer.echo(json.dumps(diff.to_dict(), indent=2, ensure_ascii=False))
        return

    if changelog:
        typer.echo(generate_changelog(diff))
        return

    ui.header("Token diff", f"{old.name} -> {new.name}")
    if diff.is_empty:
        ui.success("No changes")
        return
    ui.diff_summary(diff, similarity=similarity_score(old_set, new_set))
