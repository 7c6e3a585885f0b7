"""Rich console output for sync runs."""

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

if TYPE_CHECKING:
    from reposync.sync.engine import SyncResult


class SyncLogger:
    """Rich console output for sync runs, written to stderr."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False, colored: bool = True):
        """Initialize logger.

        Args:
            console: Rich Console instance
            verbose: Enable debug output
            colored: Enable colored output (ignored when console is given)
        """
        self.console = console or Console(stderr=True, no_color=not colored, highlight=False)
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Blue info message."""
        self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Green success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Yellow warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Red error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Dim message, only in verbose mode."""
        if self.verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def summary(self, result: "SyncResult") -> None:
        """Display final sync summary."""
        snapshot = result.snapshot.commit[:12] if result.snapshot.commit else "none"
        replayed = result.reconcile.replayed_count if result.reconcile else 0
        conflicts = len(result.reconcile.resolved_paths) if result.reconcile else 0

        summary_text = f"""
[green]✓ Sync completed successfully[/green]

[bold]Summary:[/bold]
  • Branch: [cyan]{escape(result.branch)}[/cyan]
  • Snapshot commit: [cyan]{snapshot}[/cyan]
  • Behind before sync: [blue]{result.divergence.behind}[/blue]
  • Replayed commits: [green]{replayed}[/green]
  • Conflicts resolved (remote wins): [yellow]{conflicts}[/yellow]
  • Published: [cyan]{result.published[:12]}[/cyan]
"""
        panel = Panel(summary_text.strip(), title="Sync Result", border_style="green")
        self.console.print(panel)
