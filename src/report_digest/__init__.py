"""Normalize test runner JSON reports into one canonical summary."""

from .detect import REPORT_FORMATS, ReportFormat, detect_format, normalize_report
from .errors import (
    NoEntriesError,
    ReportError,
    ResultFileNotFoundError,
    ResultParseError,
    UnrecognizedFormatError,
)
from .formatting import build_summary, format_duration, parse_duration
from .loader import NamedEntry, load_result_file, parse_named_entries
from .merge import (
    collapse_result,
    merge_results,
    parse_named_entries_results,
    parse_named_groups,
    parse_result_files,
)
from .result import CanonicalResult, CanonicalSuite
from .settings import ReportSettings

__version__ = "0.1.0"

__all__ = [
    "CanonicalResult",
    "CanonicalSuite",
    "NamedEntry",
    "REPORT_FORMATS",
    "ReportFormat",
    "ReportSettings",
    "ReportError",
    "ResultFileNotFoundError",
    "ResultParseError",
    "NoEntriesError",
    "UnrecognizedFormatError",
    "detect_format",
    "normalize_report",
    "format_duration",
    "parse_duration",
    "build_summary",
    "load_result_file",
    "parse_named_entries",
    "merge_results",
    "collapse_result",
    "parse_result_files",
    "parse_named_entries_results",
    "parse_named_groups",
]
