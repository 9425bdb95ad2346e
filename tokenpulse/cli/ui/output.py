# tokenpulse/cli/ui/output.py
"""
Output methods for CLI display.
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tokenpulse.diff.models import TokenChange, TokenDiff

from .console import ARROW, CHECK, CROSS, console


class OutputMixin:
    """
    Mixin providing output methods for the UI class.

    Messages and token data are plain text: brackets in paths or values
    (`[data-theme=dark]`, `url([/b])`) are escaped, never read as markup.
    """

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a command header in a fitted box."""
        if subtitle:
            content = f"[bold]{escape(title)}[/bold]\n[dim]{escape(subtitle)}[/dim]"
        else:
            content = f"[bold]{escape(title)}[/bold]"
        console.print(Panel.fit(content, border_style="blue"))

    def success(self, msg: str) -> None:
        console.print(f"[green]{CHECK}[/green] {escape(msg)}")

    def error(self, msg: str) -> None:
        console.print(f"[red]{CROSS}[/red] {escape(msg)}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{escape(msg)}[/dim]")

    def diff_summary(self, diff: TokenDiff, similarity: int | None = None) -> None:
        """Per-category change table followed by the individual changes."""
        table = Table(title="Token changes", show_lines=False)
        table.add_column("Category", style="bold")
        table.add_column("Added", justify="right", style="green")
        table.add_column("Removed", justify="right", style="red")
        table.add_column("Modified", justify="right", style="yellow")
        table.add_column("Total", justify="right")

        for name in sorted(diff.summary.categories):
            counts = diff.summary.categories[name]
            table.add_row(
                escape(name),
                str(counts.added),
                str(counts.removed),
                str(counts.modified),
                str(counts.total),
            )
        table.add_row(
            "[bold]all[/bold]",
            str(diff.summary.added_count),
            str(diff.summary.removed_count),
            str(diff.summary.modified_count),
            str(diff.summary.total_changes),
        )
        console.print(table)

        for change in diff.added:
            console.print(f"[green]+[/green] {_where(change)}: {escape(change.display_new or '')}")
        for change in diff.removed:
            console.print(f"[red]-[/red] {_where(change)}: {escape(change.display_old or '')}")
        for change in diff.modified:
            console.print(
                f"[yellow]~[/yellow] {_where(change)}: "
                f"{escape(change.display_old or '')} {ARROW} {escape(change.display_new or '')}"
            )

        if similarity is not None:
            console.print(f"\nSimilarity: [bold]{similarity}[/bold]/100")


def _where(change: TokenChange) -> str:
    return escape(f"{change.category}/{change.path}")
