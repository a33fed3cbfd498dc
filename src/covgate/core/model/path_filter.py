from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from pathspec import PathSpec

from covgate._meta import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

T = TypeVar("T")


def _read_pattern_file(source: Path) -> Iterable[str]:
    """Yield the patterns listed in *source*, skipping blanks and ``#`` comments."""
    for line in source.read_text(encoding="utf-8").splitlines():
        pattern = line.strip()
        if pattern and not pattern.startswith("#"):
            yield pattern


def _expand(patterns: Iterable[str | Path]) -> tuple[str, ...]:
    expanded: dict[str, None] = {}
    for item in patterns:
        if isinstance(item, Path) and item.is_file():
            expanded.update(dict.fromkeys(_read_pattern_file(item)))
        else:
            expanded[str(item).replace("\\", "/")] = None
    return tuple(expanded)


@dataclass(frozen=True, slots=True, init=False)
class PathFilter:
    """Include/exclude filter for report-relative file paths.

    Patterns use gitignore semantics: ``src`` selects the directory and
    everything below it, ``*.spec.ts`` selects matching files anywhere.
    A :class:`~pathlib.Path` that names an existing file is read as a
    pattern list.
    """

    include: tuple[str, ...]
    exclude: tuple[str, ...]
    _include_spec: PathSpec = field(repr=False, compare=False)
    _exclude_spec: PathSpec = field(repr=False, compare=False)

    def __init__(self, include: Iterable[str | Path] = (), exclude: Iterable[str | Path] = ()) -> None:
        inc, exc = _expand(include), _expand(exclude)
        object.__setattr__(self, "include", inc)
        object.__setattr__(self, "exclude", exc)
        object.__setattr__(self, "_include_spec", PathSpec.from_lines("gitwildmatch", inc))
        object.__setattr__(self, "_exclude_spec", PathSpec.from_lines("gitwildmatch", exc))

    def allow(self, path: str) -> bool:
        included = not self.include or self._include_spec.match_file(path)
        return bool(included) and not (self.exclude and self._exclude_spec.match_file(path))

    def filter_map(self, coverage_map: Mapping[str, T]) -> dict[str, T]:
        """Return the entries of *coverage_map* whose path is allowed."""
        kept = {path: payload for path, payload in coverage_map.items() if self.allow(path)}
        logger.debug("path filter kept %d of %d files", len(kept), len(coverage_map))
        return kept


__all__ = ["PathFilter"]
