"""Threshold engine and its data model."""

from covgate.core.collector import CollectedData, DataCollector, FailReason, FailureSink
from covgate.core.engine import (
    check_single_threshold,
    check_threshold,
    coverage_for_directory,
    covered_directories,
    evaluate_thresholds,
    normalize_threshold,
    unchecked_files,
)
from covgate.core.model import (
    GLOBAL_KEY,
    CoverageCounts,
    CoverageMetric,
    FileCoverage,
    PathFilter,
    SingleThreshold,
    ThresholdResult,
    accumulate,
    summary_percentages,
)

__all__ = [
    "GLOBAL_KEY",
    "CollectedData",
    "CoverageCounts",
    "CoverageMetric",
    "DataCollector",
    "FailReason",
    "FailureSink",
    "FileCoverage",
    "PathFilter",
    "SingleThreshold",
    "ThresholdResult",
    "accumulate",
    "check_single_threshold",
    "check_threshold",
    "coverage_for_directory",
    "covered_directories",
    "evaluate_thresholds",
    "normalize_threshold",
    "summary_percentages",
    "unchecked_files",
]
