from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from modver.core.config import CONFIG_FILENAME, Config, load_config
from modver.core.errors import ErrorCode
from modver.core.result import Err
from modver.output.console import ConsoleProtocol, RichConsole

CONFIG_ENV = "MODVER_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol


def build_context() -> CLIContext:
    """Load config from $MODVER_CONFIG, else ./modver.toml if present, else defaults."""
    console = RichConsole()

    explicit = os.environ.get(CONFIG_ENV)
    path = Path(explicit) if explicit else Path.cwd() / CONFIG_FILENAME

    config = Config()
    if explicit or path.exists():
        result = load_config(path)
        if isinstance(result, Err):
            console.error(result.error.message)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = result.value

    return CLIContext(config=config, console=console)
