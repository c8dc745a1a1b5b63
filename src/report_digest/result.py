"""Canonical result objects produced by the report normalizers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .formatting import build_summary, format_duration


class CanonicalSuite(BaseModel):
    """One logical test file or named group."""

    model_config = ConfigDict(frozen=True)

    name: str
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: Optional[int] = Field(default=None, ge=0)
    duration: Optional[str] = None
    link: Optional[str] = None

    @field_validator("skipped")
    @classmethod
    def _drop_zero_skipped(cls, value: Optional[int]) -> Optional[int]:
        return value or None

    @property
    def skipped_count(self) -> int:
        return self.skipped or 0


class CanonicalResult(BaseModel):
    """Root object handed back to every caller of the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: str
    test_suites: Tuple[CanonicalSuite, ...] = Field(default=(), alias="testSuites")
    total_link: Optional[str] = Field(default=None, alias="totalLink")
    show_timestamp: bool = Field(default=True, alias="showTimestamp")

    @classmethod
    def from_suites(cls, suites: List[CanonicalSuite]) -> "CanonicalResult":
        """Build a result whose summary is computed from ``suites``."""

        passed, failed, skipped = _sum_counts(suites)
        return cls(
            summary=build_summary(passed, failed, skipped, len(suites)),
            test_suites=tuple(suites),
            show_timestamp=True,
        )

    def totals(self) -> Tuple[int, int, int]:
        return _sum_counts(self.test_suites)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def _sum_counts(suites) -> Tuple[int, int, int]:
    passed = sum(s.passed for s in suites)
    failed = sum(s.failed for s in suites)
    skipped = sum(s.skipped_count for s in suites)
    return passed, failed, skipped


@dataclass(slots=True)
class SuiteTally:
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration_ms: float = 0.0

    def add(self, other: "SuiteTally") -> None:
        self.passed += other.passed
        self.failed += other.failed
        self.skipped += other.skipped
        self.duration_ms += other.duration_ms

    def to_suite(self, name: str, *, link: Optional[str] = None) -> CanonicalSuite:
        fields: Dict[str, Any] = {"name": name, "passed": self.passed, "failed": self.failed}
        if self.skipped > 0:
            fields["skipped"] = self.skipped
        if self.duration_ms > 0:
            fields["duration"] = format_duration(self.duration_ms)
        if link:
            fields["link"] = link
        return CanonicalSuite(**fields)


__all__ = ["CanonicalSuite", "CanonicalResult", "SuiteTally"]
