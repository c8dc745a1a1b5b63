"""Normalizer for Vitest (and Jest compatible) JSON reporter output."""

from __future__ import annotations

import logging
import ntpath
import posixpath
from typing import Any, Mapping, TypeGuard

from ..result import CanonicalResult, CanonicalSuite, SuiteTally

logger = logging.getLogger(__name__)

UNKNOWN_SUITE = "Unknown Suite"

# pending and todo never ran either; all three collapse into skipped.
_STATUS_FIELDS = {
    "passed": "passed",
    "failed": "failed",
    "skipped": "skipped",
    "pending": "skipped",
    "todo": "skipped",
}


def is_vitest_report(raw: Any) -> TypeGuard[Mapping[str, Any]]:
    """Return True for a ``testResults`` array paired with a numeric ``numTotalTests``."""

    if not isinstance(raw, Mapping):
        return False
    total = raw.get("numTotalTests")
    return (
        isinstance(raw.get("testResults"), list)
        and isinstance(total, (int, float))
        and not isinstance(total, bool)
    )


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def file_duration_ms(file_result: Mapping[str, Any]) -> float:
    start = _number(file_result.get("startTime"))
    end = _number(file_result.get("endTime"))
    if start is None or end is None:
        return 0.0
    return end - start


def file_suite_name(file_result: Mapping[str, Any]) -> str:
    # Vitest v4+ writes "name"; older releases wrote "testFilePath".
    file_path = file_result.get("name")
    if file_path is None:
        file_path = file_result.get("testFilePath")
    if file_path is None:
        return UNKNOWN_SUITE
    return posixpath.basename(ntpath.basename(str(file_path).rstrip("/\\")))


def tally_file(file_result: Mapping[str, Any]) -> SuiteTally:
    tally = SuiteTally()
    for assertion in file_result.get("assertionResults") or []:
        status = assertion.get("status")
        field = _STATUS_FIELDS.get(status) if isinstance(status, str) else None
        if field is None:
            logger.debug("ignoring vitest assertion with status %r", status)
            continue
        setattr(tally, field, getattr(tally, field) + 1)
    tally.duration_ms = file_duration_ms(file_result)
    return tally


def parse_vitest_report(raw: Mapping[str, Any]) -> CanonicalResult:
    """Produce one suite per test file record."""

    suites: list[CanonicalSuite] = []
    for file_result in raw["testResults"]:
        suites.append(tally_file(file_result).to_suite(file_suite_name(file_result)))
    return CanonicalResult.from_suites(suites)


__all__ = [
    "is_vitest_report",
    "parse_vitest_report",
    "tally_file",
    "file_suite_name",
    "file_duration_ms",
]
