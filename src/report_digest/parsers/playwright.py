"""Normalizer for Playwright JSON reporter output (``--reporter=json``)."""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeGuard

from ..result import CanonicalResult, CanonicalSuite, SuiteTally

logger = logging.getLogger(__name__)

UNKNOWN_SUITE = "Unknown Suite"

# Resolved status after retries -> tally field. "flaky" eventually passed,
# so it is counted as passed.
_STATUS_FIELDS = {
    "expected": "passed",
    "unexpected": "failed",
    "flaky": "passed",
    "skipped": "skipped",
}


def is_playwright_report(raw: Any) -> TypeGuard[Mapping[str, Any]]:
    """Return True when ``raw`` carries a top-level ``suites`` array."""

    if not isinstance(raw, Mapping):
        return False
    return isinstance(raw.get("suites"), list)


def accumulate_suite(suite: Mapping[str, Any], tally: SuiteTally) -> None:
    """Walk ``suite`` and its nested child suites, adding every test to ``tally``."""

    for spec in suite.get("specs") or []:
        for test in spec.get("tests") or []:
            status = test.get("status")
            field = _STATUS_FIELDS.get(status) if isinstance(status, str) else None
            if field is None:
                logger.debug("ignoring playwright test with status %r", status)
            else:
                setattr(tally, field, getattr(tally, field) + 1)
            results = test.get("results") or []
            if results:
                duration = results[-1].get("duration")
                if isinstance(duration, (int, float)) and not isinstance(duration, bool):
                    tally.duration_ms += duration

    for child in suite.get("suites") or []:
        accumulate_suite(child, tally)


def suite_name(suite: Mapping[str, Any]) -> str:
    return suite.get("title") or suite.get("file") or UNKNOWN_SUITE


def parse_playwright_report(raw: Mapping[str, Any]) -> CanonicalResult:
    """Produce one suite per top-level Playwright suite; nested suites roll up."""

    suites: list[CanonicalSuite] = []
    for top_suite in raw["suites"]:
        tally = SuiteTally()
        accumulate_suite(top_suite, tally)
        suites.append(tally.to_suite(suite_name(top_suite)))
    return CanonicalResult.from_suites(suites)


__all__ = ["is_playwright_report", "parse_playwright_report", "accumulate_suite", "suite_name"]
