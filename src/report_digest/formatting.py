"""Duration and summary line formatting shared by every normalizer."""

from __future__ import annotations

import math
import re

_DURATION_PATTERN = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>ms|s)\s*$")


def format_duration(ms: float) -> str:
    """Render milliseconds as ``"45ms"`` below one second, else ``"1.2s"``."""

    if ms >= 1000:
        return f"{_round_half_up(ms / 100) / 10:.1f}s"
    return f"{_round_half_up(ms)}ms"


def parse_duration(text: str | None) -> float:
    """Inverse of :func:`format_duration`; unparseable or missing values count as 0."""

    if not text:
        return 0.0
    match = _DURATION_PATTERN.match(text)
    if match is None:
        return 0.0
    value = float(match.group("value"))
    if match.group("unit") == "s":
        return value * 1000
    return value


def build_summary(passed: int, failed: int, skipped: int, suite_count: int) -> str:
    parts: list[str] = []
    if failed > 0:
        parts.append(f"{failed} failed")
    if passed > 0:
        parts.append(f"{passed} passed")
    if skipped > 0:
        parts.append(f"{skipped} skipped")
    if not parts:
        return "No tests ran"
    suite_word = "suite" if suite_count == 1 else "suites"
    return f"{', '.join(parts)} across {suite_count} {suite_word}"


def _round_half_up(value: float) -> int:
    # round() and .1f round half to even; ties must round up
    return math.floor(value + 0.5)


__all__ = ["format_duration", "parse_duration", "build_summary"]
