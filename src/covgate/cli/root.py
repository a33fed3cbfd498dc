from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from covgate._meta import __version__
from covgate.cli import check


def create_app() -> typer.Typer:
    app = typer.Typer(help="Coverage gate: check a coverage report against path and global thresholds.")

    @app.callback(invoke_without_command=True)
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = False,
    ) -> None:
        if version:
            typer.echo(f"covgate {__version__}")
            raise typer.Exit
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())

    check.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# plain click command, e.g. for documentation generators
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
