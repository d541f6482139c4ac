from __future__ import annotations

import os
from pathlib import Path

import typer

from modver import __version__
from modver.cli.commands.classify_cmd import classify_version
from modver.cli.commands.show_cmd import show, vcs
from modver.cli.commands.snapshot_cmd import snapshot
from modver.cli.context import CONFIG_ENV
from modver.core.errors import ErrorCode
from modver.logging import configure_logging


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Tell how a Go build relates to its module's tag history.",
)


# Commands
app.command("classify")(classify_version)
app.command()(show)
app.command()(vcs)
app.command()(snapshot)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (default: ./modver.toml, or ${CONFIG_ENV})",
    ),
) -> None:
    configure_logging(verbose=verbose)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' is not a file", err=True)
            raise typer.Exit(code=int(ErrorCode.IO_ERROR))
        os.environ[CONFIG_ENV] = str(path)


def main() -> None:
    app()
