"""Rich rendering of generated tables for the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from pywise.algo.coverage import CoverageStats
from pywise.core.combination import CombinationTable
from pywise.export import to_csv, to_json


class TableOutput:
    """Prints combination tables and coverage summaries.

    Example:
        >>> output = TableOutput()
        >>> output.show(table, title="Pairwise")
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show(self, table: CombinationTable, title: str = "", output_format: str = "table") -> None:
        if output_format == "json":
            self.console.print_json(to_json(table), highlight=False)
            return
        if output_format == "csv":
            self.console.print(to_csv(table), end="", markup=False, highlight=False, soft_wrap=True)
            return
        self.console.print(self.render(table, title))

    def render(self, table: CombinationTable, title: str = "") -> Table:
        rich_table = Table(
            title=title or None,
            show_header=True,
            header_style="bold",
        )
        rich_table.add_column("#", justify="right", style="dim")
        if len(table) == 0:
            return rich_table

        for parameter in table[0].parameters:
            rich_table.add_column(parameter.name)
        for number, combination in enumerate(table, start=1):
            names = [value.name for value in combination.values if value is not None]
            rich_table.add_row(str(number), *names)
        return rich_table

    def show_stats(self, stats: CoverageStats, span: int) -> None:
        summary = Table(show_header=False, box=None, padding=(0, 1))
        summary.add_column("Metric", style="bold")
        summary.add_column("Value", justify="right")
        summary.add_row("Combinations", str(stats.test_count))
        summary.add_row("Exhaustive span", str(span))
        summary.add_row("Compatible pairs", str(stats.total_pairs))
        summary.add_row("Pairs excluded by rules", str(stats.excluded_by_rules))
        style = "green" if stats.covered_pairs == stats.total_pairs else "yellow"
        summary.add_row(
            "Pairs covered",
            f"[{style}]{stats.covered_pairs} ({stats.coverage_pct:.1f}%)[/{style}]",
        )
        if stats.incomplete_count:
            summary.add_row("Degraded combinations", f"[red]{stats.incomplete_count}[/red]")
        self.console.print(summary)
