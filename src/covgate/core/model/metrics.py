"""Per-file coverage counts and their additive accumulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate.core.model.types import FULL_COVERAGE, METRIC_ORDER, CoverageMetric

if TYPE_CHECKING:
    from collections.abc import Iterable


def pct(covered: int, total: int, *, full: float = float(FULL_COVERAGE)) -> float:
    """Return the coverage percentage, defaulting to `full` when no total exists."""
    return full if total == 0 else (covered / total) * full


@dataclass(frozen=True, slots=True)
class CoverageCounts:
    """Covered/total pair for one metric."""

    covered: int = 0
    total: int = 0

    def __add__(self, other: CoverageCounts) -> CoverageCounts:
        return CoverageCounts(covered=self.covered + other.covered, total=self.total + other.total)

    @property
    def percentage(self) -> float:
        return pct(self.covered, self.total)


@dataclass(frozen=True, slots=True)
class FileCoverage:
    """Raw coverage counts for one file, directory subtree or bucket.

    Fields
    ------
    statements, branches, functions, lines:
        Counts per metric. ``None`` means the report format does not track
        the metric, which is different from tracking it with nothing to cover.
    """

    statements: CoverageCounts | None = None
    branches: CoverageCounts | None = None
    functions: CoverageCounts | None = None
    lines: CoverageCounts | None = None

    def counts(self, metric: CoverageMetric) -> CoverageCounts | None:
        return getattr(self, metric.value)


def summary_percentages(coverage: FileCoverage) -> dict[CoverageMetric, float | None]:
    """Return the 0-100 percentage of every metric, ``None`` for untracked ones."""
    out: dict[CoverageMetric, float | None] = {}
    for metric in METRIC_ORDER:
        counts = coverage.counts(metric)
        out[metric] = None if counts is None else counts.percentage
    return out


def accumulate(coverages: Iterable[FileCoverage]) -> FileCoverage:
    """Add the counts of *coverages* into a single synthetic record.

    An empty input yields zero counts for every metric. A metric stays
    untracked only when every accumulated record left it untracked.
    """
    totals: dict[CoverageMetric, CoverageCounts] = dict.fromkeys(METRIC_ORDER, CoverageCounts())
    seen: set[CoverageMetric] = set()
    empty = True

    for coverage in coverages:
        empty = False
        for metric in METRIC_ORDER:
            counts = coverage.counts(metric)
            if counts is None:
                continue
            seen.add(metric)
            totals[metric] += counts

    return FileCoverage(
        **{metric.value: (counts if empty or metric in seen else None) for metric, counts in totals.items()}
    )


__all__ = [
    "CoverageCounts",
    "FileCoverage",
    "accumulate",
    "pct",
    "summary_percentages",
]
