"""Loading coverage reports from disk and choosing their extractor."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from covgate._meta import logger
from covgate.errors import CoverageReportNotFoundError, InvalidCoverageReportError
from covgate.inputs import cobertura, istanbul

if TYPE_CHECKING:
    from pathlib import Path

    from covgate.core.model.metrics import FileCoverage


@dataclass(frozen=True, slots=True)
class LoadedReport:
    """A raw report paired with the function extracting its per-file coverage."""

    report: Any
    extract: Callable[[Any], Mapping[str, FileCoverage]]


def load_report(path: Path) -> LoadedReport:
    """Read *path* as Cobertura XML (``.xml``) or istanbul/Jest JSON (anything else)."""
    if not path.is_file():
        msg = f"coverage report not found: {path}"
        raise CoverageReportNotFoundError(msg)

    if path.suffix.lower() == ".xml":
        logger.info("reading Cobertura XML report %s", path)
        return LoadedReport(report=cobertura.read_root(path), extract=cobertura.file_coverage_map)

    logger.info("reading istanbul JSON report %s", path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"failed to parse coverage JSON {path}: {exc}"
        raise InvalidCoverageReportError(msg) from exc
    if not isinstance(data, Mapping):
        msg = f"coverage JSON {path} must contain an object"
        raise InvalidCoverageReportError(msg)
    return LoadedReport(report=data, extract=istanbul.file_coverage_map)


__all__ = ["LoadedReport", "load_report"]
