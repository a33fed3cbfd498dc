from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from covgate._meta import logger
from covgate.cli._shared import configure_logging, resolve_use_color
from covgate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_THRESHOLD,
)
from covgate.core.collector import DataCollector, FailReason
from covgate.core.model.path_filter import PathFilter
from covgate.core.model.thresholds import SingleThreshold, parse_threshold
from covgate.core.model.types import GLOBAL_KEY
from covgate.core.pipeline import CheckOptions, ConfigError, DataError, NoInputError, run_check
from covgate.errors import ThresholdConfigError
from covgate.io import OutputFormat, color_allowed, write_output
from covgate.render import format_json, render_results

_BOOL_FALSE = False


def _parse_overrides(global_expr: str | None, entries: list[str]) -> list[tuple[str, SingleThreshold]]:
    overrides: list[tuple[str, SingleThreshold]] = []
    if global_expr is not None:
        overrides.append((GLOBAL_KEY, parse_threshold(global_expr)))
    for entry in entries:
        pattern, sep, expression = entry.rpartition(":")
        if not sep or not pattern:
            msg = f"expected PATTERN:METRIC=VALUE[,...], got {entry!r}"
            raise ThresholdConfigError(msg)
        overrides.append((pattern, parse_threshold(expression)))
    return overrides


def check_cmd(
    report: Annotated[
        Path,
        typer.Argument(help="Coverage report: Jest --json output, coverage-final.json or Cobertura XML."),
    ],
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Threshold file (JSON or TOML). Defaults to pyproject.toml, then package.json.",
        ),
    ] = None,
    global_: Annotated[
        str | None,
        typer.Option("--global", help="Thresholds for files no path rule covers, e.g. 'statements=80,branches=70'."),
    ] = None,
    threshold: Annotated[
        list[str] | None,
        typer.Option(
            "-t",
            "--threshold",
            help="Path rule PATTERN:METRIC=VALUE[,...] (repeatable), e.g. 'src/core/:lines=90'.",
        ),
    ] = None,
    working_directory: Annotated[
        str | None,
        typer.Option(
            "-w",
            "--working-directory",
            help="Directory report paths are relative to (joined onto the current directory).",
        ),
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option("-i", "--include", help="Only evaluate files matching these patterns (repeatable)."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("-x", "--exclude", help="Ignore files matching these patterns (repeatable)."),
    ] = None,
    format_: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format.", case_sensitive=False),
    ] = OutputFormat.HUMAN,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output"),
    ] = _BOOL_FALSE,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output"),
    ] = _BOOL_FALSE,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
    ] = _BOOL_FALSE,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
    ] = _BOOL_FALSE,
) -> None:
    """Check a coverage report against path and global thresholds."""
    configure_logging(quiet=quiet, verbose=verbose)

    try:
        overrides = _parse_overrides(global_, threshold or [])
    except ThresholdConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc

    include = include or []
    exclude = exclude or []
    opts = CheckOptions(
        report_path=report,
        cwd=Path.cwd(),
        working_directory=working_directory,
        config_path=config,
        overrides=tuple(overrides),
        path_filter=PathFilter(include=include, exclude=exclude) if (include or exclude) else None,
    )

    collector: DataCollector[FailReason] = DataCollector()
    try:
        results = run_check(opts, collector)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc
    except NoInputError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc
    except DataError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc
    except Exception as exc:
        logger.exception("unexpected failure")
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_GENERIC) from exc

    fail_reasons = collector.get().data
    if format_ == OutputFormat.JSON:
        text = format_json(results, fail_reasons)
    else:
        use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=color_allowed(output))
        text = render_results(results, color=use_color)

    write_output(text, output)
    raise typer.Exit(code=EXIT_THRESHOLD if FailReason.UNDER_THRESHOLD in fail_reasons else EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["register"]
