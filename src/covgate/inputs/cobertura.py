"""Per-file coverage extraction from Cobertura-style coverage XML."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from defusedxml import DefusedXmlException, ElementTree

from covgate.core.model.metrics import CoverageCounts, FileCoverage
from covgate.errors import InvalidCoverageReportError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


class XmlNode(Protocol):
    """The parts of an ElementTree element the reader touches."""

    tag: str | None
    text: str | None

    def findall(self, path: str) -> list[XmlNode]: ...

    def get(self, key: str, default: str | None = None) -> str | None: ...


@dataclass(frozen=True, slots=True)
class LineHit:
    number: int
    hits: int
    # (covered, total) conditions, when the line is a branch point
    conditions: tuple[int, int] | None = None


@dataclass(slots=True)
class _FileAccumulator:
    lines: dict[int, int] = field(default_factory=dict)
    branches: dict[int, tuple[int, int]] = field(default_factory=dict)
    methods: dict[tuple[str, str], bool] = field(default_factory=dict)

    def add_line(self, hit: LineHit) -> None:
        self.lines[hit.number] = max(self.lines.get(hit.number, 0), hit.hits)
        if hit.conditions is not None:
            covered, total = self.branches.get(hit.number, (0, 0))
            self.branches[hit.number] = (max(covered, hit.conditions[0]), max(total, hit.conditions[1]))

    def to_coverage(self, *, track_functions: bool) -> FileCoverage:
        line_counts = CoverageCounts(
            covered=sum(1 for hits in self.lines.values() if hits > 0),
            total=len(self.lines),
        )
        branch_counts = CoverageCounts(
            covered=sum(c for c, _ in self.branches.values()),
            total=sum(t for _, t in self.branches.values()),
        )
        functions = (
            CoverageCounts(covered=sum(self.methods.values()), total=len(self.methods)) if track_functions else None
        )
        return FileCoverage(
            statements=line_counts,
            branches=branch_counts,
            functions=functions,
            lines=line_counts,
        )


def read_root(path: Path) -> XmlNode:
    """Parse *path* with defusedxml and return its ``<coverage>`` root."""
    try:
        root = ElementTree.parse(path).getroot()
    except (ElementTree.ParseError, DefusedXmlException) as exc:
        msg = f"failed to parse coverage XML {path}: {exc}"
        raise InvalidCoverageReportError(msg) from exc
    local_name = (root.tag or "").rpartition("}")[2]
    if local_name.lower() != "coverage":
        msg = f"unexpected root tag {root.tag!r} in {path}"
        raise InvalidCoverageReportError(msg)
    return root


_CONDITIONS = re.compile(r"\d+\s*%\s*\(\s*(\d+)\s*/\s*(\d+)\s*\)")


def parse_condition_coverage(text: str) -> tuple[int, int] | None:
    """Return ``(covered, total)`` from a value like ``'50% (1/2)'``."""
    match = _CONDITIONS.search(text or "")
    return (int(match[1]), int(match[2])) if match else None


def _line_hits(parent: XmlNode) -> Iterator[LineHit]:
    for node in parent.findall("./lines/line"):
        try:
            number = int(node.get("number") or "")
            hits = int(node.get("hits") or "")
        except ValueError:
            # malformed or missing attributes
            continue
        yield LineHit(number, hits, parse_condition_coverage(node.get("condition-coverage") or ""))


def _source_root(root: XmlNode) -> str | None:
    for source in root.findall("./sources/source"):
        text = (source.text or "").strip()
        if text:
            return text.replace("\\", "/")
    return None


def _resolve(filename: str, source: str | None) -> str:
    filename = filename.replace("\\", "/")
    if source is None or posixpath.isabs(filename):
        return filename
    return posixpath.normpath(posixpath.join(source, filename))


def file_coverage_map(root: XmlNode) -> dict[str, FileCoverage]:
    """Return coverage per file path from a parsed Cobertura XML root.

    Relative filenames are joined onto the first ``<source>``. Functions are
    only tracked for files whose classes list ``<method>`` elements.
    """
    source = _source_root(root)
    files: dict[str, _FileAccumulator] = {}

    for cls in root.findall(".//class"):
        filename = cls.get("filename")
        if not filename:
            continue
        acc = files.setdefault(_resolve(filename, source), _FileAccumulator())
        for hit in _line_hits(cls):
            acc.add_line(hit)
        for method in cls.findall("./methods/method"):
            key = (method.get("name") or "", method.get("signature") or "")
            called = any(hit.hits > 0 for hit in _line_hits(method))
            acc.methods[key] = acc.methods.get(key, False) or called

    return {path: acc.to_coverage(track_functions=bool(acc.methods)) for path, acc in files.items()}


__all__ = [
    "LineHit",
    "XmlNode",
    "file_coverage_map",
    "parse_condition_coverage",
    "read_root",
]
