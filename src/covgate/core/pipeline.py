from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.config import discover_thresholds, load_threshold_file, merge_thresholds
from covgate.core.collector import FailReason
from covgate.core.engine import check_threshold
from covgate.errors import (
    CoverageReportNotFoundError,
    InvalidCoverageReportError,
    ThresholdConfigError,
)
from covgate.inputs.load import load_report

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from covgate.core.collector import DataCollector
    from covgate.core.model.path_filter import PathFilter
    from covgate.core.model.thresholds import SingleThreshold, ThresholdResult


class PipelineError(Exception):
    """Base class for errors emitted by the pipeline."""


class NoInputError(PipelineError):
    """Coverage report was missing."""


class DataError(PipelineError):
    """Coverage report is malformed or could not be parsed."""


class ConfigError(PipelineError):
    """Threshold configuration is missing or malformed."""


@dataclass(frozen=True, slots=True)
class CheckOptions:
    report_path: Path
    cwd: Path
    working_directory: str | None = None
    config_path: Path | None = None
    overrides: Sequence[tuple[str, SingleThreshold]] = ()
    path_filter: PathFilter | None = None


def resolve_thresholds(opts: CheckOptions) -> dict[str, SingleThreshold]:
    """Load thresholds from ``--config`` or discovery, then apply command-line overrides."""
    if opts.config_path is not None:
        logger.info("Using thresholds from %s", opts.config_path)
        base = load_threshold_file(opts.config_path)
        if base is None:
            msg = f"no thresholds found in {opts.config_path}"
            raise ThresholdConfigError(msg)
    else:
        base = discover_thresholds(opts.cwd)

    thresholds = merge_thresholds(base, opts.overrides)
    if not thresholds:
        msg = "no coverage thresholds configured"
        raise ThresholdConfigError(msg)
    return thresholds


def run_check(opts: CheckOptions, collector: DataCollector[FailReason]) -> list[ThresholdResult]:
    """Load the report and thresholds described by *opts* and evaluate them.

    Failures to load are recorded on *collector* and re-raised as
    :class:`PipelineError` subclasses.
    """
    try:
        thresholds = resolve_thresholds(opts)
    except ThresholdConfigError as exc:
        collector.add(FailReason.INVALID_THRESHOLD_CONFIG)
        collector.error(exc)
        raise ConfigError(str(exc)) from exc

    try:
        loaded = load_report(opts.report_path)
        results = check_threshold(
            loaded.report,
            thresholds,
            opts.working_directory,
            collector,
            extract=loaded.extract,
            cwd=opts.cwd,
            path_filter=opts.path_filter,
        )
    except CoverageReportNotFoundError as exc:
        collector.add(FailReason.REPORT_NOT_FOUND)
        collector.error(exc)
        raise NoInputError(str(exc)) from exc
    except InvalidCoverageReportError as exc:
        collector.add(FailReason.INVALID_COVERAGE_FORMAT)
        collector.error(exc)
        raise DataError(str(exc)) from exc
    except OSError as exc:
        collector.add(FailReason.REPORT_NOT_FOUND)
        collector.error(exc)
        raise NoInputError(str(exc)) from exc

    logger.info("%d threshold violation(s)", len(results))
    collector.info(f"checked {len(thresholds)} threshold selector(s)")
    return results


__all__ = [
    "CheckOptions",
    "ConfigError",
    "DataError",
    "NoInputError",
    "PipelineError",
    "resolve_thresholds",
    "run_check",
]
