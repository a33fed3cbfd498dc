from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate.core.model.types import FULL_COVERAGE, METRIC_ORDER, CoverageMetric
from covgate.errors import ThresholdConfigError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

_THRESHOLD_PATTERN = re.compile(r"^[a-zA-Z_-]+=")

_METRIC_ALIASES: dict[str, CoverageMetric] = {
    "stmt": CoverageMetric.STATEMENTS,
    "statement": CoverageMetric.STATEMENTS,
    "statements": CoverageMetric.STATEMENTS,
    "br": CoverageMetric.BRANCHES,
    "branch": CoverageMetric.BRANCHES,
    "branches": CoverageMetric.BRANCHES,
    "fn": CoverageMetric.FUNCTIONS,
    "func": CoverageMetric.FUNCTIONS,
    "function": CoverageMetric.FUNCTIONS,
    "functions": CoverageMetric.FUNCTIONS,
    "ln": CoverageMetric.LINES,
    "line": CoverageMetric.LINES,
    "lines": CoverageMetric.LINES,
}


@dataclass(frozen=True, slots=True)
class SingleThreshold:
    """Minimum coverage percentages (0..100) declared for one selector.

    Metrics left as ``None`` are not checked.
    """

    statements: float | None = None
    branches: float | None = None
    functions: float | None = None
    lines: float | None = None

    def is_empty(self) -> bool:
        return all(value is None for _, value in self._all())

    def items(self) -> Iterator[tuple[CoverageMetric, float]]:
        """Yield declared ``(metric, minimum)`` pairs in canonical order."""
        for metric, value in self._all():
            if value is not None:
                yield metric, value

    def _all(self) -> Iterator[tuple[CoverageMetric, float | None]]:
        for metric in METRIC_ORDER:
            yield metric, getattr(self, metric.value)


@dataclass(frozen=True, slots=True)
class ThresholdResult:
    """One unmet metric for a file, directory or the global bucket."""

    path: str
    type: CoverageMetric
    expected: float
    received: float

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "type": self.type.value,
            "expected": self.expected,
            "received": self.received,
        }


def parse_threshold(expression: str) -> SingleThreshold:
    """Parse a threshold expression like 'statements=90,branches=80,fn=75'."""
    if not expression or not expression.strip():
        msg = "threshold expression must be non-empty"
        raise ThresholdConfigError(msg)

    values: dict[str, float] = {}
    tokens = [token.strip() for token in re.split(r"[,\s]+", expression) if token.strip()]
    for token in tokens:
        if "=" not in token or not _THRESHOLD_PATTERN.match(token):
            msg = f"invalid threshold token: {token!r}"
            raise ThresholdConfigError(msg)

        key, raw_value = token.split("=", 1)
        metric = _resolve_metric(key)
        if metric.value in values:
            msg = f"duplicate percentage constraint in {token!r}"
            raise ThresholdConfigError(msg)
        values[metric.value] = _parse_percentage(raw_value.strip().rstrip("%"), token=token)

    return SingleThreshold(**values)


def parse_single_threshold(raw: Mapping[str, object], *, selector: str) -> SingleThreshold:
    """Build a :class:`SingleThreshold` from a ``{metric: minimum}`` mapping."""
    values: dict[str, float] = {}
    for key, raw_value in raw.items():
        metric = _resolve_metric(key, selector=selector)
        if isinstance(raw_value, bool) or not isinstance(raw_value, int | float):
            msg = f"threshold for {selector!r} {metric.value} must be a number, got {raw_value!r}"
            raise ThresholdConfigError(msg)
        # keep the configured number type, 77 stays an int
        values[metric.value] = _check_range(raw_value, context=f"{selector!r} {metric.value}")
    return SingleThreshold(**values)


def parse_threshold_spec(raw: Mapping[str, Mapping[str, object]]) -> dict[str, SingleThreshold]:
    """Convert a raw ``{selector: {metric: minimum}}`` mapping, keeping key order."""
    return {selector: parse_single_threshold(entry, selector=selector) for selector, entry in raw.items()}


def _resolve_metric(key: str, *, selector: str | None = None) -> CoverageMetric:
    try:
        return _METRIC_ALIASES[key.strip().lower()]
    except KeyError as exc:
        where = f" for {selector!r}" if selector is not None else ""
        msg = f"unknown threshold metric{where}: {key!r}"
        raise ThresholdConfigError(msg) from exc


def _parse_percentage(value: str, *, token: str) -> float:
    try:
        percent = int(value) if value.isdigit() else float(value)
    except ValueError as exc:
        msg = f"invalid percentage value in {token!r}: {value!r}"
        raise ThresholdConfigError(msg) from exc
    return _check_range(percent, context=repr(token))


def _check_range(percent: float, *, context: str) -> float:
    if percent < 0 or percent > float(FULL_COVERAGE):
        msg = f"percentage out of range in {context}: {percent}"
        raise ThresholdConfigError(msg)
    return percent


__all__ = [
    "SingleThreshold",
    "ThresholdResult",
    "parse_single_threshold",
    "parse_threshold",
    "parse_threshold_spec",
]
