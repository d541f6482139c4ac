from __future__ import annotations

import json

import typer

from modver.cli.context import build_context
from modver.core.errors import ErrorCode
from modver.core.result import Err
from modver.version.identifier import base_tag_of, classify, commit_id_of, commit_time_of


def classify_version(
    identifier: str = typer.Argument(
        ..., help="Module version, e.g. v1.2.4-0.20230105120000-abc123def456"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON object"),
) -> None:
    """Classify a Go module version string."""
    ctx = build_context()

    result = classify(identifier)
    if isinstance(result, Err):
        ctx.console.error(str(result.error))
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    parsed = result.value
    commit_time = commit_time_of(parsed)
    fields = {
        "classification": str(parsed.kind),
        "base_tag": base_tag_of(parsed),
        "commit_id": commit_id_of(parsed),
        "commit_time": commit_time.isoformat() if commit_time is not None else None,
    }

    if as_json:
        typer.echo(json.dumps({"version": identifier, **fields}, indent=2))
        return

    ctx.console.field("version", identifier)
    for name, value in fields.items():
        if value is not None:
            ctx.console.field(name.replace("_", " "), value)
