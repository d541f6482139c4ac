"""Build info embedded in a Go binary, and the sources that provide it."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

from modver.core.result import Ok, Result

__all__ = [
    "BuildInfo",
    "BuildInfoError",
    "BuildInfoSource",
    "StaticSource",
]


@dataclass(frozen=True, slots=True)
class BuildInfoError:
    """Build info could not be read.

    Attributes:
        message: What went wrong
        path: The binary or snapshot involved, if any
    """

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


@dataclass(frozen=True, slots=True)
class BuildInfo:
    """The parts of `runtime/debug.BuildInfo` modver needs.

    Attributes:
        module_path: Main module path, e.g. "github.com/acme/tool"
        main_version: Main module version, e.g. "(devel)" or "v1.2.3"
        toolchain_version: Go version the binary was built with
        settings: Build settings in the order they were recorded
        binary: File the info was read from, if any
    """

    module_path: str
    main_version: str
    toolchain_version: str
    settings: tuple[tuple[str, str], ...] = ()
    binary: Path | None = None

    @property
    def app_name(self) -> str:
        """Last element of the module path."""
        if not self.module_path:
            return ""
        return PurePosixPath(self.module_path).name


class BuildInfoSource(Protocol):
    """Anything that can produce the build info of one program."""

    def read(self) -> Result[BuildInfo, BuildInfoError]: ...


@dataclass(frozen=True, slots=True)
class StaticSource:
    """Serves build info that is already in memory."""

    info: BuildInfo

    def read(self) -> Result[BuildInfo, BuildInfoError]:
        return Ok(self.info)
