"""Typed configuration loading and access.

modver reads an optional `modver.toml`:

    [templates]
    brief = "{{ app_name }} {{ app_version }}\\n"
    detail = "..."

    [display]
    time_format = "%Y-%m-%d %H:%M:%S %Z"

    [go]
    executable = "go"
    timeout = 30
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_raw_str, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "DisplayConfig",
    "GoConfig",
    "TemplatesConfig",
    "load_config",
    "CONFIG_FILENAME",
    "DEFAULT_BRIEF_TEMPLATE",
    "DEFAULT_DETAIL_TEMPLATE",
    "DEFAULT_TIME_FORMAT",
]

CONFIG_FILENAME = "modver.toml"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_BRIEF_TEMPLATE = (
    "{{ app_name }} version {{ app_version }}, built with {{ toolchain_version }}\n"
)

DEFAULT_DETAIL_TEMPLATE = """\
WARNING! This is not a release version, it's built from a {{ tag_remarks }}.

VCS information:
VCS:         {{ vcs }}
Module path: {{ module_path }}
Commit time: {{ commit_time }}
Revision id: {{ revision }}

Please visit {{ module_path }} to get updates.
"""

DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

DEFAULT_GO_EXECUTABLE = "go"
DEFAULT_GO_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class TemplatesConfig:
    """jinja2 templates for the brief line and the detail block."""

    brief: str = DEFAULT_BRIEF_TEMPLATE
    detail: str = DEFAULT_DETAIL_TEMPLATE


@dataclass(frozen=True, slots=True)
class DisplayConfig:
    """strftime format for commit times, applied in local time."""

    time_format: str = DEFAULT_TIME_FORMAT


@dataclass(frozen=True, slots=True)
class GoConfig:
    """How to invoke the Go toolchain when reading a binary."""

    executable: str = DEFAULT_GO_EXECUTABLE
    timeout: float = DEFAULT_GO_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    go: GoConfig = field(default_factory=GoConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        templates: StrDict = get_table(data, "templates") or {}
        display: StrDict = get_table(data, "display") or {}
        go: StrDict = get_table(data, "go") or {}

        timeout = get_float(go, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"go.timeout must be positive, got {timeout}")

        return cls(
            templates=TemplatesConfig(
                brief=get_raw_str(templates, "brief") or DEFAULT_BRIEF_TEMPLATE,
                detail=get_raw_str(templates, "detail") or DEFAULT_DETAIL_TEMPLATE,
            ),
            display=DisplayConfig(
                time_format=get_raw_str(display, "time_format") or DEFAULT_TIME_FORMAT,
            ),
            go=GoConfig(
                executable=get_str(go, "executable") or DEFAULT_GO_EXECUTABLE,
                timeout=timeout or DEFAULT_GO_TIMEOUT_SECONDS,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to modver.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

