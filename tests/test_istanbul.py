from __future__ import annotations

import pytest
from conftest import istanbul_entry

from covgate.core.model.metrics import CoverageCounts
from covgate.errors import InvalidCoverageReportError
from covgate.inputs.istanbul import coverage_entries, file_coverage, file_coverage_map


def test_file_coverage_counts_every_metric() -> None:
    entry = istanbul_entry("/p/a.ts", statements=[1, 0, 2], functions=[0, 5], branches=[[1, 0], [0, 0, 3]])
    cov = file_coverage(entry)
    assert cov.statements == CoverageCounts(2, 3)
    assert cov.functions == CoverageCounts(1, 2)
    assert cov.branches == CoverageCounts(2, 5)
    assert cov.lines == CoverageCounts(2, 3)


def test_lines_use_best_statement_per_line() -> None:
    entry = istanbul_entry("/p/a.ts", statements=[0, 1, 0, 0], statement_lines=[1, 1, 2, 2])
    assert file_coverage(entry).lines == CoverageCounts(1, 2)


def test_file_coverage_unwraps_data_key() -> None:
    entry = {"data": istanbul_entry("/p/a.ts", statements=[1, 1])}
    assert file_coverage(entry).statements == CoverageCounts(2, 2)


def test_file_without_branches_tracks_zero_of_zero() -> None:
    cov = file_coverage(istanbul_entry("/p/a.ts", statements=[1]))
    assert cov.branches == CoverageCounts(0, 0)


def test_coverage_entries_accepts_bare_map_and_jest_report() -> None:
    entry = istanbul_entry("/p/a.ts", statements=[1])
    assert coverage_entries({"/p/a.ts": entry}) == {"/p/a.ts": entry}
    assert coverage_entries({"coverageMap": {"/p/a.ts": entry}}) == {"/p/a.ts": entry}


def test_file_coverage_map_normalizes_windows_separators() -> None:
    entry = istanbul_entry("C:\\p\\a.ts", statements=[1])
    assert list(file_coverage_map({"C:\\p\\a.ts": entry})) == ["C:/p/a.ts"]


def test_file_coverage_map_from_jest_report(jest_report, project_root) -> None:
    coverage_map = file_coverage_map(jest_report)
    key = f"{project_root.as_posix()}/src/format/formatCoverage.ts"
    assert coverage_map[key].statements == CoverageCounts(3, 6)
    assert coverage_map[key].functions == CoverageCounts(1, 2)


@pytest.mark.parametrize(
    ("report", "pattern"),
    [
        ([], "must be a JSON object"),
        ({"coverageMap": []}, "does not contain a coverage map"),
        ({"/p/a.ts": "nope"}, "expected a file coverage object"),
        ({"/p/a.ts": {"s": [1, 2]}}, "expected an object of hit counts"),
        ({"/p/a.ts": {"s": {"0": "x"}}}, "hit counts must be numbers"),
        ({"/p/a.ts": {"b": {"0": 3}}}, "expected a list of hit counts per branch"),
        ({"/p/a.ts": {"s": {"0": 1}, "statementMap": {"0": {}}}}, "has no start line"),
    ],
)
def test_file_coverage_map_rejects_malformed_reports(report: object, pattern: str) -> None:
    with pytest.raises(InvalidCoverageReportError, match=pattern):
        file_coverage_map(report)  # type: ignore[arg-type]
