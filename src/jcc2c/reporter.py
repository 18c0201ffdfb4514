"""Terminal reporter with rich output formatting.

Everything goes to stderr: stdout may be carrying the converted document.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from jcc2c.models import CoberturaReport

console = Console(stderr=True)

_HIGH_COVERAGE = 80.0
_MEDIUM_COVERAGE = 50.0


def _coverage_color(percentage: float) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percentage >= _HIGH_COVERAGE:
        return "green"
    if percentage >= _MEDIUM_COVERAGE:
        return "yellow"
    return "red"


def _format_rate(rate: float, *, bold: bool = False) -> str:
    if math.isnan(rate):
        return "[dim]n/a[/dim]"
    percentage = rate * 100
    style = _coverage_color(percentage)
    if bold:
        style = f"bold {style}"
    return f"[{style}]{percentage:.1f}%[/{style}]"


class CLIReporter:
    """Rich terminal output for conversion runs."""

    def __init__(self, target: Console | None = None) -> None:
        self.console = target or console

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True)

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True)

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", soft_wrap=True)

    def print_coverage_summary(self, report: CoberturaReport) -> None:
        """Print per-package line and branch rates with the report totals."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Classes", justify="right")
        table.add_column("Line Rate", justify="right")
        table.add_column("Branch Rate", justify="right")
        table.add_column("Complexity", justify="right")

        for package in report.packages:
            table.add_row(
                package.name or "[dim](default)[/dim]",
                str(len(package.classes)),
                _format_rate(package.metrics.line_rate),
                _format_rate(package.metrics.branch_rate),
                f"{package.metrics.complexity:g}",
            )

        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            f"[bold]{report.class_count}[/bold]",
            _format_rate(report.metrics.line_rate, bold=True),
            _format_rate(report.metrics.branch_rate, bold=True),
            f"[bold]{report.metrics.complexity:g}[/bold]",
        )
        self.console.print(table)


reporter = CLIReporter()
