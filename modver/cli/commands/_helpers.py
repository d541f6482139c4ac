from __future__ import annotations

from pathlib import Path

import typer

from modver.buildinfo import BuildInfoSource, GoBinarySource, SnapshotSource
from modver.cli.context import CLIContext
from modver.core.errors import ErrorCode
from modver.output.console import Style


def select_source(ctx: CLIContext, binary: Path | None, snapshot: Path | None) -> BuildInfoSource:
    """Pick the build-info source from the BINARY argument or --snapshot."""
    if (binary is None) == (snapshot is None):
        ctx.console.error("pass either a BINARY or --snapshot, not both")
        ctx.console.print("hint: modver show ./app  |  modver show --snapshot app.toml", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if snapshot is not None:
        return SnapshotSource(snapshot)

    assert binary is not None
    go = ctx.config.go
    return GoBinarySource(binary, go=go.executable, timeout=go.timeout)


def read_template(ctx: CLIContext, path: Path | None) -> str | None:
    """Read a template file given on the command line."""
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        ctx.console.error(f"cannot read template {path}: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
