from __future__ import annotations

import sys
from enum import StrEnum
from pathlib import Path

import click.utils as click_utils


class OutputFormat(StrEnum):
    HUMAN = "human"
    JSON = "json"


def write_output(text: str, destination: Path | None) -> None:
    """Write output to stdout or a file (PATH or '-' for stdout)."""
    if destination is None or destination == Path("-"):
        sys.stdout.write(text if text.endswith("\n") else f"{text}\n")
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")


def color_allowed(destination: Path | None) -> bool:
    """Return whether ANSI color may be used for output going to *destination*."""
    if destination not in {None, Path("-")}:
        return False
    try:
        is_tty = bool(getattr(sys.stdout, "isatty", lambda: False)())
    except OSError:
        return False
    return is_tty and not click_utils.should_strip_ansi(sys.stdout)


__all__ = ["OutputFormat", "color_allowed", "write_output"]
