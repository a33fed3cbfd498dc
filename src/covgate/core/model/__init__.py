from covgate.core.model.metrics import CoverageCounts, FileCoverage, accumulate, pct, summary_percentages
from covgate.core.model.path_filter import PathFilter
from covgate.core.model.thresholds import (
    SingleThreshold,
    ThresholdResult,
    parse_single_threshold,
    parse_threshold,
    parse_threshold_spec,
)
from covgate.core.model.types import FULL_COVERAGE, GLOBAL_KEY, METRIC_ORDER, CoverageMetric

__all__ = [
    "FULL_COVERAGE",
    "GLOBAL_KEY",
    "METRIC_ORDER",
    "CoverageCounts",
    "CoverageMetric",
    "FileCoverage",
    "PathFilter",
    "SingleThreshold",
    "ThresholdResult",
    "accumulate",
    "parse_single_threshold",
    "parse_threshold",
    "parse_threshold_spec",
    "pct",
    "summary_percentages",
]
