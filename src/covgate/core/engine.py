"""Resolution of path/global coverage thresholds against a coverage report.

Thresholds are a flat mapping of selectors to :class:`SingleThreshold`.
A selector is either ``"global"`` or a glob pattern naming files or
directories relative to the working directory. Every selector is evaluated
on its own:

* against directories implied by the report paths, using the aggregated
  coverage of each matched subtree;
* against files, using each matched file's own coverage.

The ``global`` rule is checked once, over the aggregate of all files that no
selector (or directory matched by a selector) covers.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from covgate._meta import logger
from covgate.core.collector import FailReason
from covgate.core.model.metrics import accumulate, summary_percentages
from covgate.core.model.thresholds import ThresholdResult
from covgate.core.model.types import GLOBAL_KEY
from covgate.core.paths import (
    exclude_paths,
    match_paths,
    relativize,
    resolve_working_directory,
    subtree_patterns,
)
from covgate.inputs.istanbul import file_coverage_map

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from pathlib import Path

    from covgate.core.collector import FailureSink
    from covgate.core.model.metrics import FileCoverage
    from covgate.core.model.path_filter import PathFilter
    from covgate.core.model.thresholds import SingleThreshold

    CoverageMap = Mapping[str, FileCoverage]
    Extractor = Callable[[Any], Mapping[str, FileCoverage]]

_TRAILING_SEP = re.compile(r"[\\/]+$")


def normalize_threshold(threshold: Mapping[str, SingleThreshold]) -> dict[str, SingleThreshold]:
    """Return the path selectors of *threshold* without trailing separators.

    The ``global`` selector is dropped.
    """
    return {
        _TRAILING_SEP.sub("", selector): value for selector, value in threshold.items() if selector != GLOBAL_KEY
    }


def covered_directories(coverage_map: CoverageMap) -> list[str]:
    """Return every ancestor directory of the report's files, root excluded.

    Directories are listed in discovery order: for each file, its parent
    chain from nearest to outermost, skipping ones already seen.
    """
    found: dict[str, None] = {}
    for path in coverage_map:
        directory = PurePosixPath(path).parent
        # `.` and `/` are their own parents
        while directory != directory.parent:
            found.setdefault(directory.as_posix())
            directory = directory.parent
    return list(found)


def unchecked_files(threshold: Mapping[str, SingleThreshold], coverage_map: CoverageMap) -> list[str]:
    """Return the files that no path selector of *threshold* covers."""
    selectors = list(normalize_threshold(threshold))
    files = list(coverage_map)

    if not selectors:
        return files

    directories = covered_directories(coverage_map)
    covered = [*selectors, *match_paths(directories, selectors)]
    patterns = [pattern for selector in covered for pattern in subtree_patterns(selector)]
    return exclude_paths(files, patterns)


def coverage_for_directory(directory: str, coverage_map: CoverageMap) -> FileCoverage:
    """Return the accumulated coverage of every file at any depth below *directory*."""
    prefix = f"{directory}/"
    return accumulate(
        coverage for path, coverage in coverage_map.items() if path == directory or path.startswith(prefix)
    )


def check_single_threshold(
    threshold: SingleThreshold,
    coverage: FileCoverage | None,
    path: str,
) -> ThresholdResult | None:
    """Return the first metric of *threshold* that *coverage* falls short of.

    Metrics are checked in canonical order. Missing coverage and untracked
    metrics never fail.
    """
    if coverage is None:
        return None

    percentages = summary_percentages(coverage)
    for metric, expected in threshold.items():
        received = percentages[metric]
        if received is None:
            continue
        if received < expected:
            logger.debug("%s: %s %s below %s", path, metric.value, received, expected)
            return ThresholdResult(path=path, type=metric, expected=expected, received=received)
    return None


def evaluate_thresholds(
    threshold: Mapping[str, SingleThreshold],
    coverage_map: CoverageMap,
) -> list[ThresholdResult]:
    """Evaluate *threshold* against an already relativized *coverage_map*.

    Results are ordered: directory matches, then file matches (each in
    selector declaration order), then the ``global`` bucket.
    """
    results: list[ThresholdResult] = []
    entries = list(normalize_threshold(threshold).items())

    directories = covered_directories(coverage_map)
    for pattern, single in entries:
        selected = match_paths(directories, pattern)
        logger.debug("selector %r matched %d directories", pattern, len(selected))
        for directory in selected:
            result = check_single_threshold(single, coverage_for_directory(directory, coverage_map), directory)
            if result is not None:
                results.append(result)

    files = list(coverage_map)
    for pattern, single in entries:
        selected = match_paths(files, pattern)
        logger.debug("selector %r matched %d files", pattern, len(selected))
        for filename in selected:
            result = check_single_threshold(single, coverage_map.get(filename), filename)
            if result is not None:
                results.append(result)

    global_threshold = threshold.get(GLOBAL_KEY)
    if global_threshold is not None:
        remaining = unchecked_files(threshold, coverage_map)
        logger.debug("global bucket holds %d of %d files", len(remaining), len(files))
        total = accumulate(coverage_map[filename] for filename in remaining)
        result = check_single_threshold(global_threshold, total, GLOBAL_KEY)
        if result is not None:
            results.append(result)

    return results


def check_threshold(
    report: Any,
    threshold: Mapping[str, SingleThreshold],
    working_directory: str | Path | None,
    collector: FailureSink[FailReason],
    *,
    extract: Extractor = file_coverage_map,
    cwd: Path | None = None,
    path_filter: PathFilter | None = None,
) -> list[ThresholdResult]:
    """Check *report* against *threshold* and return every violation found.

    Report paths are made relative to *working_directory* (joined onto
    *cwd*, the process working directory by default). When any violation
    exists, :attr:`FailReason.UNDER_THRESHOLD` is added to *collector* once.
    """
    prefix = resolve_working_directory(working_directory, cwd=cwd)
    coverage_map = relativize(extract(report), prefix)
    if path_filter is not None:
        coverage_map = path_filter.filter_map(coverage_map)

    results = evaluate_thresholds(threshold, coverage_map)

    if results:
        collector.add(FailReason.UNDER_THRESHOLD)

    return results


__all__ = [
    "check_single_threshold",
    "check_threshold",
    "coverage_for_directory",
    "covered_directories",
    "evaluate_thresholds",
    "normalize_threshold",
    "unchecked_files",
]
