from __future__ import annotations

import sys
from pathlib import Path

import typer

from modver.buildinfo.model import BuildInfoError
from modver.cli.commands._helpers import read_template, select_source
from modver.cli.context import build_context
from modver.core.errors import ErrorCode
from modver.core.result import Err
from modver.version.report import Reporter, TemplateError
from modver.version.vcs import normalize


def show(
    binary: Path | None = typer.Argument(None, help="Go binary to inspect"),
    snapshot: Path | None = typer.Option(None, "--snapshot", help="Read a TOML snapshot instead"),
    version: str | None = typer.Option(
        None, "--version-override", help="Classify this version instead of the embedded one"
    ),
    brief: Path | None = typer.Option(
        None, "--brief", help="jinja2 template file for the brief line"
    ),
    detail: Path | None = typer.Option(
        None, "--detail", help="jinja2 template file for the detail block"
    ),
) -> None:
    """Print the version report of a Go binary."""
    ctx = build_context()
    source = select_source(ctx, binary, snapshot)
    reporter = Reporter(source, ctx.config)

    result = reporter.write(
        sys.stdout,
        read_template(ctx, brief),
        read_template(ctx, detail),
        version=version,
    )
    if isinstance(result, Err):
        ctx.console.error(str(result.error))
        match result.error:
            case BuildInfoError():
                raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
            case TemplateError():
                raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def vcs(
    binary: Path | None = typer.Argument(None, help="Go binary to inspect"),
    snapshot: Path | None = typer.Option(None, "--snapshot", help="Read a TOML snapshot instead"),
) -> None:
    """Print the raw VCS settings of a Go binary, without reconciliation."""
    ctx = build_context()
    source = select_source(ctx, binary, snapshot)

    info = source.read()
    if isinstance(info, Err):
        ctx.console.error(str(info.error))
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    meta = normalize(info.value.settings)
    ctx.console.field("vcs", meta.kind)
    ctx.console.field("revision", meta.revision)
    ctx.console.field("modified", "true" if meta.is_dirty else "false")
    commit_time = meta.last_commit_time.isoformat() if meta.last_commit_time else "unknown"
    ctx.console.field("commit time", commit_time)
