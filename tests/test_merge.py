import asyncio
import json
from pathlib import Path

import pytest

from report_digest import merge as merge_module
from report_digest.errors import (
    NoEntriesError,
    ResultFileNotFoundError,
    ResultParseError,
    UnrecognizedFormatError,
)
from report_digest.loader import NamedEntry, load_result_file
from report_digest.merge import (
    collapse_result,
    expand_entry_paths,
    merge_results,
    parse_named_entries_results,
    parse_named_groups,
    parse_result_files,
)
from report_digest.result import CanonicalResult, CanonicalSuite
from report_digest.settings import ReportSettings

PLAYWRIGHT_PASSING = "playwright/all-passing.json"
VITEST_PASSING = "vitest/all-passing.json"


def _path(fixtures_dir: Path, name: str) -> str:
    return str(fixtures_dir / name)


def _summary_counts(summary: str) -> dict[str, int]:
    counts = {"passed": 0, "failed": 0, "skipped": 0}
    head = summary.split(" across ")[0]
    for part in head.split(", "):
        number, _, category = part.partition(" ")
        if category in counts:
            counts[category] = int(number)
    return counts


def _assert_consistent(result: CanonicalResult) -> None:
    passed, failed, skipped = result.totals()
    assert _summary_counts(result.summary) == {"passed": passed, "failed": failed, "skipped": skipped}


@pytest.mark.asyncio
async def test_single_file_is_returned_unchanged(fixtures_dir: Path) -> None:
    path = _path(fixtures_dir, PLAYWRIGHT_PASSING)
    merged = await parse_result_files([path])
    direct = await load_result_file(path)
    assert merged == direct
    assert merged.test_suites[0].name == "all-passing.spec.ts"


@pytest.mark.asyncio
async def test_flat_merge_of_two_reports(fixtures_dir: Path) -> None:
    result = await parse_result_files(
        [_path(fixtures_dir, PLAYWRIGHT_PASSING), _path(fixtures_dir, VITEST_PASSING)]
    )
    assert len(result.test_suites) == 2
    assert [s.name for s in result.test_suites] == ["all-passing.spec.ts", "vitest.all-passing.test.ts"]
    assert "14 passed" in result.summary
    assert "2 suites" in result.summary
    assert result.summary == "14 passed, 2 skipped across 2 suites"
    _assert_consistent(result)


@pytest.mark.asyncio
async def test_flat_merge_keeps_file_order_with_failures(fixtures_dir: Path) -> None:
    result = await parse_result_files(
        [
            _path(fixtures_dir, "vitest/with-failures.json"),
            _path(fixtures_dir, "playwright/with-failures.json"),
            _path(fixtures_dir, "playwright/empty.json"),
        ]
    )
    assert [s.name for s in result.test_suites] == ["math.test.ts", "todo.test.ts", "with-failures.spec.ts"]
    assert result.summary == "4 failed, 8 passed, 4 skipped across 3 suites"
    _assert_consistent(result)


@pytest.mark.asyncio
async def test_one_bad_file_fails_the_batch(fixtures_dir: Path, tmp_path: Path) -> None:
    with pytest.raises(ResultFileNotFoundError):
        await parse_result_files([_path(fixtures_dir, PLAYWRIGHT_PASSING), str(tmp_path / "missing.json")])


@pytest.mark.asyncio
async def test_empty_path_list_rejected() -> None:
    with pytest.raises(ValueError):
        await parse_result_files([])


@pytest.mark.asyncio
async def test_loads_run_concurrently_within_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    active = 0
    peak = 0

    async def _fake_load(path, *, telemetry=None):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return CanonicalResult.from_suites([CanonicalSuite(name=str(path), passed=1, failed=0)])

    monkeypatch.setattr(merge_module, "load_result_file", _fake_load)

    result = await parse_result_files(
        [f"r{i}.json" for i in range(6)],
        settings=ReportSettings(MAX_CONCURRENT_LOADS=2),
    )
    assert peak == 2
    assert [s.name for s in result.test_suites] == [f"r{i}.json" for i in range(6)]
    assert result.summary == "6 passed across 6 suites"


def test_merge_results_recomputes_summary() -> None:
    stale = CanonicalResult(
        summary="stale summary",
        test_suites=(CanonicalSuite(name="a", passed=1, failed=1),),
    )
    other = CanonicalResult.from_suites([CanonicalSuite(name="b", passed=0, failed=0, skipped=2)])
    merged = merge_results([stale, other])
    assert merged.summary == "1 failed, 1 passed, 2 skipped across 2 suites"
    assert merged.show_timestamp is True


def test_collapse_result_resums_durations() -> None:
    result = CanonicalResult.from_suites(
        [
            CanonicalSuite(name="a", passed=2, failed=1, duration="1.2s"),
            CanonicalSuite(name="b", passed=1, failed=0, skipped=1, duration="300ms"),
            CanonicalSuite(name="c", passed=0, failed=0),
        ]
    )
    suite = collapse_result("Unit Tests", result, link="https://ci/unit")
    assert suite == CanonicalSuite(
        name="Unit Tests", passed=3, failed=1, skipped=1, duration="1.5s", link="https://ci/unit"
    )


def test_collapse_result_of_nothing() -> None:
    suite = collapse_result("Empty", CanonicalResult.from_suites([]))
    assert suite.model_dump(exclude_none=True) == {"name": "Empty", "passed": 0, "failed": 0}


@pytest.mark.asyncio
async def test_grouped_entry_uses_given_name(fixtures_dir: Path) -> None:
    text = f"""
- name: Unit Tests
  path: {_path(fixtures_dir, PLAYWRIGHT_PASSING)}
"""
    result = await parse_named_groups(text)
    assert len(result.test_suites) == 1
    suite = result.test_suites[0]
    assert suite.name == "Unit Tests"
    assert (suite.passed, suite.failed, suite.skipped) == (7, 0, 1)
    assert suite.duration == "1.5s"
    assert result.summary == "7 passed, 1 skipped across 1 suite"


@pytest.mark.asyncio
async def test_grouped_entries_one_suite_per_group(fixtures_dir: Path) -> None:
    entries = [
        NamedEntry(name="Unit", path=_path(fixtures_dir, "vitest/with-failures.json"), link="https://ci/unit"),
        NamedEntry(name="E2E", path=_path(fixtures_dir, "playwright/with-failures.json")),
    ]
    result = await parse_named_entries_results(entries)

    unit, e2e = result.test_suites
    assert unit.model_dump(exclude_none=True) == {
        "name": "Unit",
        "passed": 3,
        "failed": 2,
        "skipped": 3,
        "duration": "45ms",
        "link": "https://ci/unit",
    }
    assert (e2e.name, e2e.passed, e2e.failed, e2e.skipped, e2e.duration) == ("E2E", 5, 2, 1, "800ms")
    assert result.summary == "4 failed, 8 passed, 4 skipped across 2 suites"
    _assert_consistent(result)


@pytest.mark.asyncio
async def test_grouped_entry_with_glob(fixtures_dir: Path, tmp_path: Path) -> None:
    for name in ("b.json", "a.json"):
        (tmp_path / name).write_text(
            (fixtures_dir / VITEST_PASSING).read_text(encoding="utf-8"), encoding="utf-8"
        )
    result = await parse_named_entries_results([NamedEntry(name="Shards", path=str(tmp_path / "*.json"))])
    suite = result.test_suites[0]
    # each shard is formatted as 1.2s before the group is re-summed
    assert (suite.name, suite.passed, suite.skipped, suite.duration) == ("Shards", 14, 2, "2.4s")


def test_expand_entry_paths(tmp_path: Path) -> None:
    assert expand_entry_paths("plain/results.json") == ["plain/results.json"]
    (tmp_path / "2.json").write_text("{}", encoding="utf-8")
    (tmp_path / "1.json").write_text("{}", encoding="utf-8")
    assert expand_entry_paths(str(tmp_path / "*.json")) == [str(tmp_path / "1.json"), str(tmp_path / "2.json")]
    with pytest.raises(ResultFileNotFoundError):
        expand_entry_paths(str(tmp_path / "*.xml"))


@pytest.mark.asyncio
async def test_grouped_errors_name_the_entry(tmp_path: Path) -> None:
    unknown = tmp_path / "unknown.json"
    unknown.write_text(json.dumps({"tests": []}), encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("[", encoding="utf-8")

    with pytest.raises(UnrecognizedFormatError) as excinfo:
        await parse_named_entries_results([NamedEntry(name="Odd", path=str(unknown))])
    assert excinfo.value.detail.startswith("Odd: ")
    assert isinstance(excinfo.value.__cause__, UnrecognizedFormatError)

    with pytest.raises(ResultParseError) as excinfo:
        await parse_named_entries_results([NamedEntry(name="Broken", path=str(broken))])
    assert excinfo.value.detail.startswith("Broken: ")

    with pytest.raises(ResultFileNotFoundError) as excinfo:
        await parse_named_entries_results([NamedEntry(name="Gone", path=str(tmp_path / "gone.json"))])
    assert "gone.json" in str(excinfo.value)


@pytest.mark.asyncio
async def test_grouped_without_entries() -> None:
    with pytest.raises(NoEntriesError):
        await parse_named_groups("# nothing here\n")
    with pytest.raises(NoEntriesError):
        await parse_named_entries_results([])


@pytest.mark.asyncio
async def test_grouped_entry_with_literal_bracket_in_file_name(fixtures_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "results[1].json"
    target.write_text((fixtures_dir / VITEST_PASSING).read_text(encoding="utf-8"), encoding="utf-8")

    assert expand_entry_paths(str(target)) == [str(target)]
    result = await parse_named_entries_results([NamedEntry(name="Unit", path=str(target))])
    suite = result.test_suites[0]
    assert (suite.name, suite.passed, suite.skipped) == ("Unit", 7, 1)


@pytest.mark.asyncio
async def test_failed_batch_cancels_pending_loads(monkeypatch: pytest.MonkeyPatch) -> None:
    cancelled: list[str] = []

    async def _fake_load(path, *, telemetry=None):
        if path == "bad.json":
            raise ResultFileNotFoundError(path)
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(path)
            raise
        return CanonicalResult.from_suites([])

    monkeypatch.setattr(merge_module, "load_result_file", _fake_load)

    with pytest.raises(ResultFileNotFoundError):
        await parse_result_files(["slow-a.json", "bad.json", "slow-b.json"])
    assert sorted(cancelled) == ["slow-a.json", "slow-b.json"]
