"""Path helpers: glob selection of report paths and working-directory handling."""

from __future__ import annotations

import glob
import posixpath
import re
from functools import cache
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from braceexpand import UnbalancedBracesError, braceexpand

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

T = TypeVar("T")


def _expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives and ``{1..3}`` ranges, e.g. ``src/{core,cli}/*.ts``."""
    try:
        return list(dict.fromkeys(braceexpand(pattern)))
    except UnbalancedBracesError:
        # a lone brace is matched literally
        return [pattern]


@cache
def _compile(pattern: str) -> re.Pattern[str]:
    # `*` stays within one path segment, a whole `**` segment spans any depth
    while pattern.startswith("./"):
        pattern = pattern[2:]
    alternatives = [
        glob.translate(variant, recursive=True, include_hidden=True, seps="/") for variant in _expand_braces(pattern)
    ]
    return re.compile("|".join(f"(?:{regex})" for regex in alternatives))


def _matches_any(path: str, compiled: Sequence[re.Pattern[str]]) -> bool:
    return any(regex.match(path) for regex in compiled)


def match_paths(paths: Iterable[str], patterns: str | Sequence[str]) -> list[str]:
    """Return the *paths* matched by any of *patterns*, in input order."""
    compiled = [_compile(patterns)] if isinstance(patterns, str) else [_compile(p) for p in patterns]
    if not compiled:
        return []
    return [path for path in paths if _matches_any(path, compiled)]


def exclude_paths(paths: Iterable[str], patterns: Sequence[str]) -> list[str]:
    """Return the *paths* matched by none of *patterns*, in input order."""
    compiled = [_compile(p) for p in patterns]
    return [path for path in paths if not _matches_any(path, compiled)]


def subtree_patterns(selector: str) -> tuple[str, str]:
    """Return patterns matching *selector* itself or anything nested below it."""
    return selector, f"{selector}/**"


def resolve_working_directory(working_directory: str | Path | None = None, *, cwd: Path | None = None) -> str:
    """Return the absolute posix prefix that report paths are made relative to.

    ``working_directory`` is joined onto *cwd* (the process working directory
    when omitted); an absolute ``working_directory`` replaces it.
    """
    base = cwd if cwd is not None else Path.cwd()
    joined = base / (working_directory or "")
    return posixpath.normpath(joined.as_posix())


def relativize(coverage_map: Mapping[str, T], prefix: str) -> dict[str, T]:
    """Strip ``<prefix>/`` from the keys of *coverage_map*; other keys are kept as-is."""
    head = f"{prefix.rstrip('/')}/"
    return {key.replace("\\", "/").removeprefix(head): value for key, value in coverage_map.items()}


__all__ = [
    "exclude_paths",
    "match_paths",
    "relativize",
    "resolve_working_directory",
    "subtree_patterns",
]
