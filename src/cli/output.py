"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
progress bars, spinners, colored messages and the build summary. Supports
verbosity levels and the --no-color flag.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.spinner import Spinner

from src.cli.models import BuildSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output
        logger: Python logger for verbose output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Site written")
        >>> with handler.spinner("Querying database..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger("notion-sitegen")

        if self.verbosity >= 2:
            logger.setLevel(logging.DEBUG)
        elif self.verbosity >= 1:
            logger.setLevel(logging.INFO)
        else:
            logger.setLevel(logging.WARNING)

        logger.handlers.clear()
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(handler)

        return logger

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(escape(message))

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Example:
            >>> with handler.spinner("Querying database..."):
            ...     rows = api.query_database(database_id)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    @contextmanager
    def progress_bar(self, total: int, description: str = "Processing") -> Iterator[Progress]:
        """Display progress bar for multi-item operations.

        Example:
            >>> with handler.progress_bar(10, "Rendering pages") as progress:
            ...     task = progress.add_task("Rendering pages", total=10)
            ...     progress.update(task, advance=1)
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )
        with progress:
            yield progress

    def print_summary(self, summary: BuildSummary) -> None:
        """Display the build summary with color coding.

        Render warnings are listed one per line when verbosity >= 1 and
        counted otherwise.
        """
        self.console.print("\n[bold]Build Summary:[/bold]")
        self.console.print(f"  [green]✓[/green] Pages: {summary.page_count}")

        if summary.tag_page_count > 0:
            self.console.print(f"  [blue]#[/blue] Tag pages: {summary.tag_page_count}")

        if summary.preview_count > 0:
            self.console.print(f"  [magenta]◌[/magenta] Preview pages: {summary.preview_count}")

        if summary.asset_count > 0:
            self.console.print(f"  [dim]─[/dim] Static files: {summary.asset_count}")

        if summary.unpublished_count > 0:
            self.console.print(f"  [dim]⊘[/dim] Unpublished: {summary.unpublished_count} page(s)")

        if summary.skipped_count > 0:
            self.console.print(f"  [red]✗[/red] Unreadable rows: {summary.skipped_count}")

        if summary.warnings:
            self.console.print(f"  [yellow]⚠[/yellow] Warnings: {summary.warning_count}")
            if self.verbosity >= 1:
                for title, warning in summary.warnings:
                    self.console.print(f"    • {escape(title)}: {escape(str(warning))}")

        if summary.page_count == 0:
            self.console.print("\n[yellow]No published pages found[/yellow]")
        elif summary.warnings:
            self.console.print(
                f"\n[yellow]Site written to {escape(summary.output_dir)} with warnings[/yellow]"
            )
        else:
            self.console.print(f"\n[green]Site written to {escape(summary.output_dir)}[/green]")
