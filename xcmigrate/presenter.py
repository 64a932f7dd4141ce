"""Console output for migration check results."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

from .models import (
    ChangedAttribute,
    ErrorResponse,
    MissingField,
    Problem,
    Report,
    RunResult,
)


def _quote(value: Optional[str]) -> str:
    if value is None:
        return "(absent)"
    return f"'{value}'"


def describe(report: Report, problem: Problem) -> str:
    """Human-readable detail line for a problem."""
    msg = f"In version {report.to_version}"
    if isinstance(problem, (MissingField, ChangedAttribute)):
        msg += f" the field {problem.entity_name}.{problem.field_name}"
    else:
        msg += f" the entity {problem.entity_name}"

    if isinstance(problem, ChangedAttribute):
        msg += (
            f" was changed: {problem.attribute}"
            f" from {_quote(problem.old_value)} to {_quote(problem.new_value)}"
        )
    else:
        msg += " is missing"
    return msg


class ReportPresenter:
    """Prints results and decides the process exit status."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def render(self, result: RunResult | ErrorResponse) -> int:
        """
        Print a run outcome.

        Returns:
            0 when every problem is resolved, 1 otherwise
        """
        if isinstance(result, ErrorResponse):
            message = (result.error or {}).get("message", "Migration check failed")
            self.console.print(f"[bold red]{escape(message)}[/bold red]")
            return 1

        for warning in result.warnings:
            self.console.print(f"[bold yellow]{escape(warning.message)}[/bold yellow]")

        success = True
        for report in result.reports:
            if not self._render_report(report):
                success = False

        if success:
            self.console.print("Everything is OK")
            return 0

        self.console.print("")
        self.console.print("[bold red]Problems found, check the errors above[/bold red]")
        self.console.print(
            "[bold]Check, test and solve the problems, before you can add "
            "the keys to the solved file of the model[/bold]"
        )
        self.console.print("[bold red]The migration can fail! Test your app!![/bold red]")
        return 1

    def _render_report(self, report: Report) -> bool:
        if self.verbose:
            self.console.print(
                f"Migration {report.from_version} -> {report.to_version}:"
                f" {len(report.problems)} problem(s),"
                f" {len(report.unresolved)} unresolved"
            )
        for problem in report.unresolved:
            self.console.print("")
            self.console.print(f"[bold red]{escape(describe(report, problem))}[/bold red]")
            self.console.print(f"Key: [bold]{escape(problem.key)}[/bold]")
        return report.is_resolved
