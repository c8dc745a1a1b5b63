"""Read report files from disk and parse the named-entry group list."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .detect import detect_format
from .errors import (
    NoEntriesError,
    ResultFileNotFoundError,
    ResultParseError,
    UnrecognizedFormatError,
)
from .result import CanonicalResult
from .telemetry import ReportTelemetry

logger = logging.getLogger(__name__)

_ENTRY_KEYS = {"name", "path", "link"}


@dataclass(frozen=True, slots=True)
class NamedEntry:
    name: str
    path: str
    link: Optional[str] = None


async def load_result_file(
    path: str | Path,
    *,
    telemetry: ReportTelemetry | None = None,
) -> CanonicalResult:
    """Read ``path``, detect its report format and return the normalized result.

    Raises:
        ResultFileNotFoundError: nothing exists at ``path``.
        ResultParseError: the file could not be read or is not valid JSON.
        UnrecognizedFormatError: the JSON matches no known reporter shape.
    """

    label = str(path)
    file_path = Path(path)
    if not file_path.exists():
        raise ResultFileNotFoundError(label)

    try:
        contents = await asyncio.to_thread(file_path.read_text, encoding="utf-8-sig")
        raw = json.loads(contents)
    except FileNotFoundError as exc:
        raise ResultFileNotFoundError(label) from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ResultParseError.from_exception(label, exc) from exc

    report_format = detect_format(raw)
    if report_format is None:
        raise UnrecognizedFormatError(label)

    result = report_format.normalize(raw)
    logger.debug("parsed %s as %s: %s", label, report_format.name, result.summary)
    (telemetry or ReportTelemetry()).report_loaded(
        path=label, report_format=report_format.name, result=result
    )
    return result


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def _finish_entry(fields: dict[str, str], entries: List[NamedEntry]) -> None:
    name = fields.get("name")
    path = fields.get("path")
    if not name or not path:
        if fields:
            logger.debug("dropping incomplete result entry %r", fields)
        return
    entries.append(NamedEntry(name=name, path=path, link=fields.get("link") or None))


def parse_named_entries(text: str) -> List[NamedEntry]:
    """Parse an indented ``- name:`` / ``path:`` list into named entries.

    Example::

        # comments and blank lines are ignored
        - name: Unit Tests
          path: vitest-results/results.json
        - name: "E2E"
          path: 'playwright-report/results.json'
          link: https://ci.example.com/e2e
    """

    entries: List[NamedEntry] = []
    current: Optional[dict[str, str]] = None
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line == "-" or line.startswith("- "):
            if current is not None:
                _finish_entry(current, entries)
            current = {}
            line = line[1:].strip()
            if not line:
                continue
        if current is None:
            continue
        key, sep, value = line.partition(":")
        key = key.strip().lower()
        if not sep or key not in _ENTRY_KEYS:
            continue
        current[key] = _unquote(value)
    if current is not None:
        _finish_entry(current, entries)

    if not entries:
        raise NoEntriesError()
    return entries


__all__ = ["NamedEntry", "load_result_file", "parse_named_entries"]
