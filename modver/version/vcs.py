"""Normalize the `vcs.*` build settings stamped into Go binaries."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from modver.logging import get_logger

__all__ = [
    "RepositoryMetadata",
    "Settings",
    "normalize",
    "UNKNOWN",
    "VCS_KEY",
    "VCS_MODIFIED_KEY",
    "VCS_REVISION_KEY",
    "VCS_TIME_KEY",
]

logger = get_logger("vcs")

UNKNOWN = "unknown"

VCS_KEY = "vcs"
VCS_REVISION_KEY = "vcs.revision"
VCS_TIME_KEY = "vcs.time"
VCS_MODIFIED_KEY = "vcs.modified"

# RFC 3339 date-time; the offset is mandatory
_RFC3339_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)

type Settings = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True, slots=True)
class RepositoryMetadata:
    """VCS facts about the tree a binary was built from.

    Attributes:
        kind: VCS name, e.g. "git"
        revision: Revision id of the checkout
        is_dirty: True if the working tree had local modifications
        last_commit_time: Time of the revision, if known
    """

    kind: str = UNKNOWN
    revision: str = UNKNOWN
    is_dirty: bool = False
    last_commit_time: datetime | None = None

    def to_settings(self) -> list[tuple[str, str]]:
        """Encode back into build settings that `normalize` maps to self."""
        settings = [
            (VCS_KEY, self.kind),
            (VCS_REVISION_KEY, self.revision),
            (VCS_MODIFIED_KEY, "true" if self.is_dirty else "false"),
        ]
        if self.last_commit_time is not None:
            settings.append((VCS_TIME_KEY, self.last_commit_time.isoformat()))
        return settings


def _parse_rfc3339(value: str) -> datetime | None:
    if not _RFC3339_RE.fullmatch(value):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def normalize(settings: Settings | None) -> RepositoryMetadata:
    """Extract repository metadata from build settings.

    Settings are scanned in order and a later duplicate key overwrites an
    earlier one. Unknown keys are skipped. An unparseable `vcs.time` keeps the
    previous value. Never fails: no recognized key means all defaults.

    Args:
        settings: (key, value) pairs as found in the binary, a mapping, or None.
    """
    if settings is None:
        return RepositoryMetadata()
    pairs = settings.items() if isinstance(settings, Mapping) else settings

    kind = UNKNOWN
    revision = UNKNOWN
    dirty = False
    commit_time: datetime | None = None

    for key, value in pairs:
        match key:
            case "vcs":
                kind = value
            case "vcs.revision":
                revision = value
            case "vcs.time":
                parsed = _parse_rfc3339(value)
                if parsed is None:
                    logger.debug("ignoring unparseable %s=%r", key, value)
                else:
                    commit_time = parsed
            case "vcs.modified":
                dirty = value == "true"
            case _:
                pass

    return RepositoryMetadata(
        kind=kind,
        revision=revision,
        is_dirty=dirty,
        last_commit_time=commit_time,
    )
