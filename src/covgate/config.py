"""Central configuration: constants, bundled schemas and threshold loading."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING, Any

from jsonschema import ValidationError, validate

from covgate._meta import logger
from covgate.core.model.thresholds import parse_threshold_spec
from covgate.errors import ThresholdConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from covgate.core.model.thresholds import SingleThreshold

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

_SCHEMA_FILES: dict[str, str] = {
    "thresholds": "thresholds.schema.json",
    "results": "results.schema.json",
}


@cache
def get_schema(name: str = "thresholds") -> dict[str, object]:
    """Load and cache one of the bundled JSON schemas."""
    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema: {name!r}. Available schemas: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("covgate.data").joinpath(filename).read_text(encoding="utf-8"))


def validate_threshold_spec(raw: object, *, source: str) -> dict[str, SingleThreshold]:
    """Validate a raw ``{selector: {metric: minimum}}`` object and convert it."""
    try:
        validate(instance=raw, schema=get_schema("thresholds"))
    except ValidationError as exc:
        where = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        msg = f"invalid thresholds in {source} at {where}: {exc.message}"
        raise ThresholdConfigError(msg) from exc
    return parse_threshold_spec(raw)  # type: ignore[arg-type]


def _extract_from_json(data: object, *, discovery: bool) -> object | None:
    jest = data.get("jest") if isinstance(data, Mapping) else None
    if isinstance(jest, Mapping) and "coverageThreshold" in jest:
        return jest["coverageThreshold"]
    if discovery:
        # package.json without thresholds
        return None
    if not isinstance(data, Mapping):
        return data
    if "coverageThreshold" in data:
        return data["coverageThreshold"]
    if "jest" in data or "name" in data:
        return None
    return data


def _extract_from_toml(data: Mapping[str, Any], *, discovery: bool) -> object | None:
    tool = data.get("tool", {})
    if isinstance(tool, Mapping) and "covgate" in tool:
        section = tool["covgate"]
        return section.get("thresholds") if isinstance(section, Mapping) else section
    if discovery or "tool" in data or "project" in data:
        # pyproject.toml without thresholds
        return None
    return data


def _read_raw(path: Path, *, discovery: bool = False) -> object | None:
    """Read the raw threshold object from *path*.

    With *discovery* only the project-file sections are consulted and any
    other content yields ``None``.
    """
    try:
        if path.suffix.lower() == ".toml":
            with path.open("rb") as f:
                raw = _extract_from_toml(tomllib.load(f), discovery=discovery)
        else:
            raw = _extract_from_json(json.loads(path.read_text(encoding="utf-8")), discovery=discovery)
    except FileNotFoundError as exc:
        msg = f"threshold configuration not found: {path}"
        raise ThresholdConfigError(msg) from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        msg = f"failed to read threshold configuration {path}: {exc}"
        raise ThresholdConfigError(msg) from exc

    return raw


def load_threshold_file(path: Path) -> dict[str, SingleThreshold] | None:
    """Load thresholds from a JSON or TOML file.

    JSON may hold the thresholds directly, a Jest config (``coverageThreshold``) or a
    ``package.json`` (``jest.coverageThreshold``). TOML may hold them at
    top level or a pyproject (``[tool.covgate.thresholds]``). Returns ``None``
    when the file is a project file without any thresholds.
    """
    raw = _read_raw(path)
    if raw is None:
        return None
    return validate_threshold_spec(raw, source=str(path))


def discover_thresholds(base: Path) -> dict[str, SingleThreshold] | None:
    """Look for thresholds in ``pyproject.toml`` then ``package.json`` under *base*."""
    for name in ("pyproject.toml", "package.json"):
        candidate = base / name
        if not candidate.is_file():
            continue
        try:
            raw = _read_raw(candidate, discovery=True)
        except ThresholdConfigError as exc:
            logger.warning("Failed to parse %s: %s", candidate, exc)
            continue
        if raw is None:
            continue
        logger.info("Using thresholds from %s", candidate)
        return validate_threshold_spec(raw, source=str(candidate))
    return None


def merge_thresholds(
    base: Mapping[str, SingleThreshold] | None,
    overrides: Iterable[tuple[str, SingleThreshold]],
) -> dict[str, SingleThreshold]:
    """Return *base* with *overrides* applied; first insertion order is kept."""
    merged: dict[str, SingleThreshold] = dict(base or {})
    for selector, threshold in overrides:
        merged[selector] = threshold
    return merged


__all__ = [
    "LOG_FORMAT",
    "discover_thresholds",
    "get_schema",
    "load_threshold_file",
    "merge_thresholds",
    "validate_threshold_spec",
]
