from __future__ import annotations

from pathlib import Path

import typer

from modver.buildinfo import GoBinarySource, dump_snapshot
from modver.cli.context import build_context
from modver.core.errors import ErrorCode
from modver.core.result import Err
from modver.output.console import Style


def snapshot(
    binary: Path = typer.Argument(..., help="Go binary to inspect"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
) -> None:
    """Save a binary's build info as a TOML snapshot."""
    ctx = build_context()
    go = ctx.config.go

    info = GoBinarySource(binary, go=go.executable, timeout=go.timeout).read()
    if isinstance(info, Err):
        ctx.console.error(str(info.error))
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    text = dump_snapshot(info.value)
    if output is None:
        typer.echo(text, nl=False)
        return

    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        ctx.console.error(f"cannot write {output}: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
    ctx.console.print(f"wrote {output}", Style.DIM)
