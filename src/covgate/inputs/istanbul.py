"""Per-file coverage extraction from istanbul JSON (Jest ``--json`` or ``coverage-final.json``)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from covgate.core.model.metrics import CoverageCounts, FileCoverage
from covgate.errors import InvalidCoverageReportError


def _tally(hits: list[Any], *, where: str) -> CoverageCounts:
    try:
        covered = sum(1 for v in hits if v > 0)
    except TypeError as exc:
        msg = f"hit counts must be numbers in {where}"
        raise InvalidCoverageReportError(msg) from exc
    return CoverageCounts(covered=covered, total=len(hits))


def _counts(hits: Any, *, where: str) -> CoverageCounts:
    if not isinstance(hits, Mapping):
        msg = f"expected an object of hit counts in {where}"
        raise InvalidCoverageReportError(msg)
    return _tally(list(hits.values()), where=where)


def _branch_counts(hits: Any, *, where: str) -> CoverageCounts:
    if not isinstance(hits, Mapping):
        msg = f"expected an object of branch hit counts in {where}"
        raise InvalidCoverageReportError(msg)
    try:
        arms = [count for counts in hits.values() for count in counts]
    except TypeError as exc:
        msg = f"expected a list of hit counts per branch in {where}"
        raise InvalidCoverageReportError(msg) from exc
    return _tally(arms, where=where)


def _line_counts(statement_map: Any, statement_hits: Mapping[str, int], *, where: str) -> CoverageCounts:
    """Derive line coverage from statement start lines (max hits per line)."""
    if not isinstance(statement_map, Mapping):
        msg = f"expected a statementMap object in {where}"
        raise InvalidCoverageReportError(msg)
    lines: dict[int, int] = {}
    for key, location in statement_map.items():
        try:
            line = int(location["start"]["line"])
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"statement {key!r} has no start line in {where}"
            raise InvalidCoverageReportError(msg) from exc
        hits = statement_hits.get(key, 0)
        if line not in lines or lines[line] < hits:
            lines[line] = hits
    return CoverageCounts(covered=sum(1 for v in lines.values() if v > 0), total=len(lines))


def file_coverage(entry: Mapping[str, Any], *, where: str = "<entry>") -> FileCoverage:
    """Return :class:`FileCoverage` for one istanbul file coverage object."""
    data = entry.get("data", entry)
    if not isinstance(data, Mapping):
        msg = f"expected a file coverage object in {where}"
        raise InvalidCoverageReportError(msg)
    statement_hits = data.get("s", {})
    return FileCoverage(
        statements=_counts(statement_hits, where=where),
        branches=_branch_counts(data.get("b", {}), where=where),
        functions=_counts(data.get("f", {}), where=where),
        lines=_line_counts(data.get("statementMap", {}), statement_hits, where=where),
    )


def coverage_entries(report: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the ``{path: file coverage}`` mapping held by *report*."""
    if "coverageMap" in report:
        entries = report["coverageMap"]
    else:
        entries = report
    if not isinstance(entries, Mapping):
        msg = "coverage report does not contain a coverage map"
        raise InvalidCoverageReportError(msg)
    return entries


def file_coverage_map(report: Mapping[str, Any]) -> dict[str, FileCoverage]:
    """Return coverage per absolute file path from an istanbul/Jest report."""
    if not isinstance(report, Mapping):
        msg = "coverage report must be a JSON object"
        raise InvalidCoverageReportError(msg)

    out: dict[str, FileCoverage] = {}
    for path, entry in coverage_entries(report).items():
        if not isinstance(entry, Mapping):
            msg = f"expected a file coverage object for {path!r}"
            raise InvalidCoverageReportError(msg)
        out[path.replace("\\", "/")] = file_coverage(entry, where=path)
    return out


__all__ = ["coverage_entries", "file_coverage", "file_coverage_map"]
