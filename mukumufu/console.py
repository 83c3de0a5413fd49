#!/usr/bin/env python3

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table

from mukumufu.report import DependencyReport


class Console:
    """Simple console wrapper focused on output."""

    def __init__(self, **kwargs):
        self._rich = RichConsole(**kwargs)

    def print(self, *args, **kwargs):
        """Print using Rich console."""
        return self._rich.print(*args, **kwargs)

    def show_report(self, report: DependencyReport) -> None:
        """Print the reachable files and any include cycles."""
        table = Table(title=f"Files reachable from {report.root}")
        table.add_column("File")
        table.add_column("Kind")
        table.add_column("Implementation")
        table.add_column("Includes")

        for path in report.files:
            if report.is_header(path):
                kind = "header"
                implementation = report.implementations.get(path, "-")
            else:
                kind = "source"
                implementation = ""
            includes = ", ".join(report.direct_dependencies(path)) or "-"
            table.add_row(
                escape(path),
                kind,
                escape(implementation),
                escape(includes),
                style="bold" if path == report.root else None,
            )

        self.print(table)
        self.print(
            f"{len(report.compile_units)} compile units, "
            f"{len(report.files) - len(report.compile_units)} headers"
        )
        for component in report.cycles:
            self.print(f"[yellow]Include cycle:[/yellow] {escape(' -> '.join(component))}")
