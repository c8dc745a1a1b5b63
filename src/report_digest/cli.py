"""report-digest command line entry point."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from . import __version__
from .errors import ReportError
from .merge import parse_named_groups, parse_result_files
from .result import CanonicalResult
from .settings import ReportSettings
from .ux import print_error, print_report_error, print_results_table, print_success

OUTPUT_FORMATS = ("json", "yaml", "table")

app = typer.Typer(
    help="Normalize Playwright and Vitest JSON reports into one test summary",
    no_args_is_help=True,
)


def _version_callback(value: Optional[bool]) -> None:
    if value:
        typer.echo(f"report-digest version: {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """report-digest CLI."""


def _load_settings() -> ReportSettings:
    settings = ReportSettings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return settings


def _validate_output_format(value: str) -> str:
    normalized = value.lower()
    if normalized not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"Invalid format '{value}'. Valid options are: {', '.join(OUTPUT_FORMATS)}",
            param_hint="--format",
        )
    return normalized


def render_result(result: CanonicalResult, output_format: str) -> str:
    if output_format == "yaml":
        return yaml.safe_dump(result.to_dict(), default_flow_style=False, sort_keys=False)
    return result.to_json(indent=2) + "\n"


def _emit(result: CanonicalResult, output_format: str, output: Optional[Path]) -> None:
    if output_format == "table":
        if output is not None:
            raise typer.BadParameter(
                "table format can only be printed to the terminal", param_hint="--output"
            )
        print_results_table(result)
        return

    text = render_result(result, output_format)
    if output is None:
        typer.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print_success(f"Wrote {len(result.test_suites)} suite(s) to {output}: {result.summary}")


@app.command("files")
def files_command(
    paths: List[str] = typer.Argument(..., help="One or more report JSON files"),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: json, yaml or table"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the result to this file"
    ),
) -> None:
    """Merge report files, keeping one suite per test file."""
    settings = _load_settings()
    fmt = _validate_output_format(output_format or settings.OUTPUT_FORMAT)
    try:
        result = asyncio.run(parse_result_files(paths, settings=settings))
    except ReportError as exc:
        print_report_error(exc)
        raise typer.Exit(1) from exc
    _emit(result, fmt, output)


@app.command("groups")
def groups_command(
    entries_file: str = typer.Argument(
        ..., help="File listing '- name:' / 'path:' groups, or '-' for stdin"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: json, yaml or table"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the result to this file"
    ),
) -> None:
    """Collapse each named group of reports into a single suite."""
    settings = _load_settings()
    fmt = _validate_output_format(output_format or settings.OUTPUT_FORMAT)
    if entries_file == "-":
        text = sys.stdin.read()
    else:
        entries_path = Path(entries_file)
        if not entries_path.is_file():
            print_error(f"Entries file not found: {entries_file}")
            raise typer.Exit(1)
        text = entries_path.read_text(encoding="utf-8")

    try:
        result = asyncio.run(parse_named_groups(text, settings=settings))
    except ReportError as exc:
        print_report_error(exc)
        raise typer.Exit(1) from exc
    _emit(result, fmt, output)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
