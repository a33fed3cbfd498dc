"""Shared type aliases and enumerations used across covgate."""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CoverageMetric(StrEnum):
    """Coverage metrics a threshold can constrain."""

    STATEMENTS = "statements"
    BRANCHES = "branches"
    FUNCTIONS = "functions"
    LINES = "lines"


# Order in which metrics are checked; the first failing one is reported.
METRIC_ORDER: tuple[CoverageMetric, ...] = (
    CoverageMetric.STATEMENTS,
    CoverageMetric.BRANCHES,
    CoverageMetric.FUNCTIONS,
    CoverageMetric.LINES,
)

# Reserved selector for files that no path rule covers.
GLOBAL_KEY = "global"

FULL_COVERAGE: int = 100


__all__ = [
    "FULL_COVERAGE",
    "GLOBAL_KEY",
    "METRIC_ORDER",
    "CoverageMetric",
]
