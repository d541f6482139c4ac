"""Build info snapshots stored as TOML.

A snapshot records what a binary reported so it can be reported on later
without the binary or a Go toolchain:

    path = "github.com/acme/app"
    version = "v1.2.4-0.20230105120000-abc123def456"
    go_version = "go1.21.5"

    [[setting]]
    key = "vcs"
    value = "git"

    [[setting]]
    key = "vcs.modified"
    value = "true"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from modver.core.result import Err, Ok, Result
from modver.core.structured import as_str_dict, get_list, get_raw_str, get_str
from modver.logging import get_logger

from .model import BuildInfo, BuildInfoError

__all__ = ["SnapshotSource", "dump_snapshot", "load_snapshot"]

logger = get_logger("buildinfo.snapshot")


def load_snapshot(path: Path) -> Result[BuildInfo, BuildInfoError]:
    """Load build info from a TOML snapshot file."""
    try:
        data_obj: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(BuildInfoError("snapshot not found", path=path))
    except PermissionError:
        return Err(BuildInfoError("permission denied reading snapshot", path=path))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        return Err(BuildInfoError(f"invalid snapshot: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(BuildInfoError("snapshot root must be a TOML table", path=path))

    settings: list[tuple[str, str]] = []
    for index, item in enumerate(get_list(data, "setting") or []):
        entry = as_str_dict(item)
        key = get_str(entry, "key") if entry is not None else None
        value = get_raw_str(entry, "value") if entry is not None else None
        if key is None or value is None:
            return Err(
                BuildInfoError(f"setting #{index + 1} needs a string key and value", path=path)
            )
        settings.append((key, value))

    logger.debug("loaded %d settings from %s", len(settings), path)
    return Ok(
        BuildInfo(
            module_path=get_str(data, "path") or "",
            main_version=get_str(data, "version") or "",
            toolchain_version=get_str(data, "go_version") or "",
            settings=tuple(settings),
            binary=None,
        )
    )


_TOML_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _toml_char(ch: str) -> str:
    if ch in _TOML_ESCAPES:
        return _TOML_ESCAPES[ch]
    # other control characters are not allowed raw in a TOML basic string
    if ch < " " or ch == "\x7f":
        return f"\\u{ord(ch):04X}"
    return ch


def _toml_string(value: str) -> str:
    return '"' + "".join(_toml_char(ch) for ch in value) + '"'


def dump_snapshot(info: BuildInfo) -> str:
    """Serialize build info into the snapshot format `load_snapshot` reads."""
    lines = [
        f"path = {_toml_string(info.module_path)}",
        f"version = {_toml_string(info.main_version)}",
        f"go_version = {_toml_string(info.toolchain_version)}",
    ]
    for key, value in info.settings:
        lines += ["", "[[setting]]", f"key = {_toml_string(key)}", f"value = {_toml_string(value)}"]
    return "\n".join(lines) + "\n"


@dataclass(frozen=True, slots=True)
class SnapshotSource:
    """Build info read from a snapshot file."""

    path: Path

    def read(self) -> Result[BuildInfo, BuildInfoError]:
        return load_snapshot(self.path)
