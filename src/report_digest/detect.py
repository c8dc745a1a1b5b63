"""Shape probes that decide which normalizer handles a parsed report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .parsers import (
    is_playwright_report,
    is_vitest_report,
    parse_playwright_report,
    parse_vitest_report,
)
from .result import CanonicalResult


@dataclass(frozen=True, slots=True)
class ReportFormat:
    name: str
    probe: Callable[[Any], bool]
    normalize: Callable[[Any], CanonicalResult]


# Probe order decides ambiguous input: an object with a "suites" array is
# Playwright even if it also carries vitest-style fields.
REPORT_FORMATS: Tuple[ReportFormat, ...] = (
    ReportFormat("playwright", is_playwright_report, parse_playwright_report),
    ReportFormat("vitest", is_vitest_report, parse_vitest_report),
)


def detect_format(raw: Any) -> Optional[ReportFormat]:
    """Return the first format whose probe accepts ``raw``, or None."""

    for report_format in REPORT_FORMATS:
        if report_format.probe(raw):
            return report_format
    return None


def normalize_report(raw: Any) -> Optional[CanonicalResult]:
    report_format = detect_format(raw)
    if report_format is None:
        return None
    return report_format.normalize(raw)


__all__ = ["ReportFormat", "REPORT_FORMATS", "detect_format", "normalize_report"]
