"""Report format normalizers."""

from .playwright import is_playwright_report, parse_playwright_report
from .vitest import is_vitest_report, parse_vitest_report

__all__ = [
    "is_playwright_report",
    "parse_playwright_report",
    "is_vitest_report",
    "parse_vitest_report",
]
