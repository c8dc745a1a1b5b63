"""Error taxonomy raised by the report loader and merger."""

from __future__ import annotations

from typing import Optional

_NOT_FOUND_HINT = (
    "Make sure your test step runs before this one and the file path is correct.\n"
    "   Example: playwright-report/results.json"
)
_PARSE_HINT = "Ensure the file is valid JSON produced by your test runner."
_NO_ENTRIES_HINT = (
    "Each group needs a '- name:' line followed by a 'path:' line, e.g.\n"
    "   - name: Unit Tests\n"
    "     path: vitest-results/results.json"
)
_UNRECOGNIZED_HINT = (
    "Currently supported formats:\n"
    "   - Playwright JSON reporter (set reporter: json in playwright.config.ts)\n"
    "   - Vitest JSON reporter (set reporters: ['json'] in vitest.config.ts)\n\n"
    "   Example playwright.config.ts:\n"
    '     reporter: [["json", { outputFile: "playwright-report/results.json" }]]\n\n'
    "   Example vitest.config.ts:\n"
    "     reporters: ['json'],\n"
    "     outputFile: 'vitest-results/results.json'"
)


class ReportError(Exception):
    """Base error carrying a machine readable code and a remediation hint."""

    code = "report_error"
    default_hint: Optional[str] = None

    def __init__(
        self,
        detail: str,
        *,
        path: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.detail = detail
        self.path = path
        self.hint = hint if hint is not None else self.default_hint
        super().__init__(self._render())

    def _render(self) -> str:
        if self.hint:
            return f"{self.detail}\n\n{self.hint}"
        return self.detail

    def with_context(self, label: str) -> "ReportError":
        """Return a copy of this error whose detail is prefixed with ``label``."""

        clone = type(self).__new__(type(self))
        ReportError.__init__(clone, f"{label}: {self.detail}", path=self.path, hint=self.hint)
        return clone

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "code": self.code,
            "path": self.path,
            "detail": self.detail,
            "hint": self.hint,
        }


class ResultFileNotFoundError(ReportError, FileNotFoundError):
    code = "not_found"
    default_hint = _NOT_FOUND_HINT

    def __init__(self, path: str, *, hint: Optional[str] = None) -> None:
        super().__init__(f'Result file not found: "{path}"', path=path, hint=hint)


class ResultParseError(ReportError):
    code = "parse_error"
    default_hint = _PARSE_HINT

    @classmethod
    def from_exception(cls, path: str, exc: BaseException) -> "ResultParseError":
        return cls(f'Failed to read or parse result file "{path}": {exc}', path=path)


class NoEntriesError(ResultParseError):
    code = "no_entries"
    default_hint = _NO_ENTRIES_HINT

    def __init__(self, detail: str = "No named result entries found", *, hint: Optional[str] = None) -> None:
        super().__init__(detail, hint=hint)


class UnrecognizedFormatError(ReportError):
    code = "unrecognized_format"
    default_hint = _UNRECOGNIZED_HINT

    def __init__(self, path: str, *, hint: Optional[str] = None) -> None:
        super().__init__(f'Unrecognized test result format in "{path}".', path=path, hint=hint)


__all__ = [
    "ReportError",
    "ResultFileNotFoundError",
    "ResultParseError",
    "NoEntriesError",
    "UnrecognizedFormatError",
]
