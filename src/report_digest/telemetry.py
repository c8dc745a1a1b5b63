"""Structured log events for report loading and merging."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import MutableMapping

from .result import CanonicalResult


@dataclass(slots=True)
class ReportTelemetry:
    logger_name: str = "report_digest.events"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_logger", logging.getLogger(self.logger_name))

    def _emit(self, payload: MutableMapping[str, object]) -> None:
        self._logger.info("report_digest_event", extra=payload)

    def report_loaded(self, *, path: str, report_format: str, result: CanonicalResult) -> None:
        passed, failed, skipped = result.totals()
        self._emit(
            {
                "event": "report_loaded",
                "path": path,
                "report_format": report_format,
                "suites": len(result.test_suites),
                "passed": passed,
                "failed": failed,
                "skipped": skipped,
            }
        )

    def results_merged(self, *, mode: str, inputs: int, result: CanonicalResult) -> None:
        self._emit(
            {
                "event": "results_merged",
                "mode": mode,
                "inputs": inputs,
                "suites": len(result.test_suites),
                "summary": result.summary,
            }
        )


__all__ = ["ReportTelemetry"]
