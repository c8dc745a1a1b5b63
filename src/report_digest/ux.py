"""Console helpers for the report-digest command line."""

import logging
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from .errors import ReportError
from .result import CanonicalResult

CUSTOM_THEME = Theme(
    {
        "info": "bold cyan",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "hint": "yellow",
        "heading": "bold white on blue",
    }
)

console = Console(theme=CUSTOM_THEME)
err_console = Console(theme=CUSTOM_THEME, stderr=True)

logger = logging.getLogger("report_digest.cli")


def print_success(message: str, *args: Any, log: bool = True, **kwargs: Any) -> None:
    console.print(f"[success]SUCCESS:[/success] {escape(message)}", *args, **kwargs)
    if log:
        logger.info(f"SUCCESS: {message}")


def print_error(message: str, *args: Any, log: bool = True, **kwargs: Any) -> None:
    """Print an error message to stderr."""
    kwargs.setdefault("soft_wrap", True)
    err_console.print(f"[error]ERROR:[/error] {escape(message)}", *args, **kwargs)
    if log:
        logger.error(message)


def print_report_error(exc: ReportError) -> None:
    """Print a loader/merger error with its remediation hint."""
    print_error(exc.detail, log=False)
    if exc.hint:
        err_console.print(f"[hint]{escape(exc.hint)}[/hint]", soft_wrap=True)
    logger.error("report_digest failed", extra={"error": exc.to_dict()})


def build_results_table(result: CanonicalResult) -> Table:
    table = Table(title="[heading]Test Results[/heading]", expand=False, border_style="blue")
    table.add_column("Suite", style="bright_blue")
    table.add_column("Passed", style="green", justify="right")
    table.add_column("Failed", style="red", justify="right")
    table.add_column("Skipped", style="yellow", justify="right")
    table.add_column("Duration", justify="right")
    for suite in result.test_suites:
        name = f"[link={suite.link}]{escape(suite.name)}[/link]" if suite.link else escape(suite.name)
        table.add_row(
            name,
            str(suite.passed),
            str(suite.failed),
            str(suite.skipped_count),
            suite.duration or "—",
        )
    return table


def print_results_table(result: CanonicalResult) -> None:
    if result.test_suites:
        console.print(build_results_table(result))
    console.print(f"[info]Summary:[/info] {escape(result.summary)}")
