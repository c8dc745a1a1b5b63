"""Combine several normalized results into one canonical result."""

from __future__ import annotations

import asyncio
import glob
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .errors import NoEntriesError, ReportError, ResultFileNotFoundError
from .formatting import parse_duration
from .loader import NamedEntry, load_result_file, parse_named_entries
from .result import CanonicalResult, CanonicalSuite, SuiteTally
from .settings import ReportSettings
from .telemetry import ReportTelemetry

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")


def merge_results(results: Iterable[CanonicalResult]) -> CanonicalResult:
    """Concatenate every suite in input order and rebuild the summary."""

    suites = [suite for result in results for suite in result.test_suites]
    return CanonicalResult.from_suites(suites)


def collapse_result(name: str, result: CanonicalResult, *, link: Optional[str] = None) -> CanonicalSuite:
    """Fold all suites of ``result`` into a single suite called ``name``."""

    tally = SuiteTally()
    for suite in result.test_suites:
        tally.add(
            SuiteTally(
                passed=suite.passed,
                failed=suite.failed,
                skipped=suite.skipped_count,
                duration_ms=parse_duration(suite.duration),
            )
        )
    return tally.to_suite(name, link=link)


async def parse_result_files(
    paths: Sequence[str | Path],
    *,
    settings: ReportSettings | None = None,
    telemetry: ReportTelemetry | None = None,
) -> CanonicalResult:
    """Load every path concurrently and flatten them into one result.

    A single path returns that file's result unchanged. Any failing file
    fails the whole batch.
    """

    paths = list(paths)
    if not paths:
        raise ValueError("at least one result file path is required")
    settings = settings or ReportSettings()
    telemetry = telemetry or ReportTelemetry()
    limit = asyncio.Semaphore(settings.MAX_CONCURRENT_LOADS)

    async def _load(path: str | Path) -> CanonicalResult:
        async with limit:
            return await load_result_file(path, telemetry=telemetry)

    tasks = [asyncio.ensure_future(_load(path)) for path in paths]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    if len(results) == 1:
        return results[0]

    merged = merge_results(results)
    telemetry.results_merged(mode="flat", inputs=len(results), result=merged)
    return merged


def expand_entry_paths(path: str) -> List[str]:
    """Expand a glob pattern into sorted matches; plain paths pass through."""

    if Path(path).exists() or not any(char in path for char in _GLOB_CHARS):
        return [path]
    matches = sorted(match for match in glob.glob(path, recursive=True) if Path(match).is_file())
    if not matches:
        raise ResultFileNotFoundError(path)
    return matches


async def load_named_entry(
    entry: NamedEntry,
    *,
    settings: ReportSettings | None = None,
    telemetry: ReportTelemetry | None = None,
) -> CanonicalSuite:
    try:
        paths = expand_entry_paths(entry.path)
        result = await parse_result_files(paths, settings=settings, telemetry=telemetry)
    except ReportError as exc:
        raise exc.with_context(entry.name) from exc
    return collapse_result(entry.name, result, link=entry.link)


async def parse_named_entries_results(
    entries: Sequence[NamedEntry],
    *,
    settings: ReportSettings | None = None,
    telemetry: ReportTelemetry | None = None,
) -> CanonicalResult:
    """Load each entry in order and emit exactly one suite per entry."""

    if not entries:
        raise NoEntriesError()
    telemetry = telemetry or ReportTelemetry()
    suites: List[CanonicalSuite] = []
    for entry in entries:
        logger.debug("loading result group %r from %s", entry.name, entry.path)
        suites.append(await load_named_entry(entry, settings=settings, telemetry=telemetry))

    merged = CanonicalResult.from_suites(suites)
    telemetry.results_merged(mode="grouped", inputs=len(entries), result=merged)
    return merged


async def parse_named_groups(
    text: str,
    *,
    settings: ReportSettings | None = None,
    telemetry: ReportTelemetry | None = None,
) -> CanonicalResult:
    entries = parse_named_entries(text)
    return await parse_named_entries_results(entries, settings=settings, telemetry=telemetry)


__all__ = [
    "merge_results",
    "collapse_result",
    "parse_result_files",
    "expand_entry_paths",
    "load_named_entry",
    "parse_named_entries_results",
    "parse_named_groups",
]
