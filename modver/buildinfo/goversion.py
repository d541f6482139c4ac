"""Read build info from a Go binary with `go version -m`.

`go version -m ./app` prints a header followed by the binary's build info,
one tab-indented record per line:

    ./app: go1.21.5
    	path	github.com/acme/app
    	mod	github.com/acme/app	v1.2.4-0.20230105120000-abc123def456
    	dep	golang.org/x/sys	v0.15.0	h1:...
    	build	-compiler=gc
    	build	vcs=git
    	build	vcs.revision=abc123def4567890
    	build	vcs.time=2023-01-05T12:00:00Z
    	build	vcs.modified=true

Keys and values of `build` records are Go-quoted when they contain spaces,
quotes or `=`.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path

from modver.core.config import DEFAULT_GO_EXECUTABLE, DEFAULT_GO_TIMEOUT_SECONDS
from modver.core.result import Err, Ok, Result
from modver.logging import get_logger
from modver.platform.process import run

from .model import BuildInfo, BuildInfoError

__all__ = ["GoBinarySource", "parse_go_version_output"]

logger = get_logger("buildinfo.go")


def _quoted_end(text: str) -> int | None:
    """Index just past the closing quote of a Go-quoted string at the start of `text`."""
    i = 1
    while i < len(text):
        match text[i]:
            case "\\":
                i += 2
            case '"':
                return i + 1
            case _:
                i += 1
    return None


def _unquote(text: str) -> tuple[str, str]:
    """Split a possibly-quoted leading token off `text`.

    Returns (token, rest). Unquoted tokens run to the first "=". Go's
    strconv.Quote escapes are all valid Python string escapes, so a quoted
    token is decoded as a Python literal.
    """
    if text.startswith('"'):
        end = _quoted_end(text)
        if end is not None:
            try:
                token = ast.literal_eval(text[:end])
            except (ValueError, SyntaxError):
                logger.debug("cannot unquote %r", text[:end])
            else:
                if isinstance(token, str):
                    return token, text[end:]
    key, sep, rest = text.partition("=")
    return key, sep + rest


def _parse_build_setting(field: str) -> tuple[str, str] | None:
    key, rest = _unquote(field)
    if not key or not rest.startswith("="):
        return None
    raw_value = rest[1:]
    if raw_value.startswith('"'):
        value, trailing = _unquote(raw_value)
        if not trailing:
            return key, value
    return key, raw_value


@dataclass
class _Collected:
    toolchain: str = ""
    path: str = ""
    mod_path: str = ""
    version: str = ""
    has_mod: bool = False


def parse_go_version_output(
    text: str, binary: Path | None = None
) -> Result[BuildInfo, BuildInfoError]:
    """Parse the output of `go version -m` for a single binary.

    The unindented `debug.BuildInfo.String()` form (first line `go\\tgo1.x`)
    is accepted as well.
    """
    found = _Collected()
    settings: list[tuple[str, str]] = []

    for line in text.splitlines():
        if not line.strip():
            continue
        if not line.startswith("\t") and ": " in line and not found.toolchain:
            found.toolchain = line.rsplit(": ", 1)[1].strip()
            continue

        fields = line.lstrip("\t").split("\t")
        match fields:
            case ["go", version, *_]:
                found.toolchain = version
            case ["path", path, *_]:
                found.path = path
            case ["mod", mod_path, *rest]:
                found.has_mod = True
                found.mod_path = mod_path
                found.version = rest[0] if rest else ""
            case ["build", setting, *_]:
                parsed = _parse_build_setting(setting)
                if parsed is None:
                    logger.debug("skipping build record %r", setting)
                else:
                    settings.append(parsed)
            case _:
                # dep and => (replacement) records
                pass

    module_path = found.path or found.mod_path
    if not found.has_mod and not module_path:
        return Err(BuildInfoError("no module build info in binary", path=binary))

    return Ok(
        BuildInfo(
            module_path=module_path,
            main_version=found.version,
            toolchain_version=found.toolchain,
            settings=tuple(settings),
            binary=binary,
        )
    )


@dataclass(frozen=True, slots=True)
class GoBinarySource:
    """Build info of a compiled Go binary, read through the go toolchain.

    Attributes:
        binary: Path to the executable
        go: go executable to run
        timeout: Seconds to wait for `go version -m`
    """

    binary: Path
    go: str = DEFAULT_GO_EXECUTABLE
    timeout: float = DEFAULT_GO_TIMEOUT_SECONDS

    def read(self) -> Result[BuildInfo, BuildInfoError]:
        if not self.binary.is_file():
            return Err(BuildInfoError("binary not found", path=self.binary))

        cmd = [self.go, "version", "-m", str(self.binary)]
        logger.debug("running %s", " ".join(cmd))
        result = run(cmd, cwd=self.binary.parent, timeout=self.timeout)
        if isinstance(result, Err):
            detail = result.error.stderr.strip() or str(result.error)
            return Err(BuildInfoError(f"cannot read build info: {detail}", path=self.binary))

        return parse_go_version_output(result.value, binary=self.binary)
