"""Classify Go module version strings.

A main-module version string takes one of these layouts:

    dirty or untracked working copy   (devel)
    release                           vX.Y.Z
    pre-release                       vX.Y.Z-RC1
    pseudo, untagged branch           v0.0.0-YYYYmmddHHMMSS-aabbccddeeff
    pseudo, after a release tag       vX.Y.(Z+1)-0.YYYYmmddHHMMSS-aabbccddeeff
    pseudo, after a pre-release tag   vX.Y.Z-RC1.0.YYYYmmddHHMMSS-aabbccddeeff

`classify` maps a string to one variant of `ParsedIdentifier`. Each variant
carries only the fields that make sense for it, so a `Release` can never hold
a commit id and a `PseudoUntagged` can never hold a base tag.

See also: https://go.dev/ref/mod#pseudo-versions
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import ClassVar

from modver.core.result import Err, Ok, Result
from modver.logging import get_logger

__all__ = [
    "Classification",
    "Devel",
    "MalformedIdentifier",
    "ParsedIdentifier",
    "PreRelease",
    "PseudoBasePreRelease",
    "PseudoBaseRelease",
    "PseudoUntagged",
    "Release",
    "Unrecognized",
    "base_tag_of",
    "classify",
    "commit_id_of",
    "commit_time_of",
]

logger = get_logger("identifier")

DEVEL_VERSION = "(devel)"

_TIMESTAMP_LEN = len("YYYYmmddHHMMSS")
_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
_TIMESTAMP_RE = re.compile(r"\d{14}", re.ASCII)
# "0." ahead of the timestamp: zero or more commits since a release tag
_RELEASE_MARKER_LEN = len("0.")
# ".0." between a pre-release tag and the timestamp
_PRERELEASE_MARKER_LEN = len(".0.")


class Classification(StrEnum):
    """Names of the variants, for display and templates."""

    DEVEL = "devel"
    RELEASE = "release"
    PRE_RELEASE = "pre-release"
    PSEUDO_UNTAGGED = "pseudo-untagged"
    PSEUDO_BASE_RELEASE = "pseudo-base-release"
    PSEUDO_BASE_PRE_RELEASE = "pseudo-base-pre-release"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Devel:
    """Built from a working copy with `go build`; no tag machinery involved."""

    kind: ClassVar[Classification] = Classification.DEVEL


@dataclass(frozen=True, slots=True)
class Release:
    """Built exactly at a release tag."""

    kind: ClassVar[Classification] = Classification.RELEASE


@dataclass(frozen=True, slots=True)
class PreRelease:
    """Built exactly at a pre-release tag."""

    kind: ClassVar[Classification] = Classification.PRE_RELEASE


@dataclass(frozen=True, slots=True)
class PseudoUntagged:
    """Built on a branch that has no ancestor tag at all."""

    commit_id: str
    commit_time: datetime

    kind: ClassVar[Classification] = Classification.PSEUDO_UNTAGGED


@dataclass(frozen=True, slots=True)
class PseudoBaseRelease:
    """Built some commits after the release tag `base_tag`."""

    base_tag: str
    commit_id: str
    commit_time: datetime

    kind: ClassVar[Classification] = Classification.PSEUDO_BASE_RELEASE


@dataclass(frozen=True, slots=True)
class PseudoBasePreRelease:
    """Built some commits after the pre-release tag `base_tag`."""

    base_tag: str
    commit_id: str
    commit_time: datetime

    kind: ClassVar[Classification] = Classification.PSEUDO_BASE_PRE_RELEASE


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """The version string could not be classified."""

    identifier: str

    kind: ClassVar[Classification] = Classification.ERROR


type ParsedIdentifier = (
    Devel
    | Release
    | PreRelease
    | PseudoUntagged
    | PseudoBaseRelease
    | PseudoBasePreRelease
    | Unrecognized
)

_PSEUDO_VARIANTS = (PseudoUntagged, PseudoBaseRelease, PseudoBasePreRelease)


@dataclass(frozen=True, slots=True)
class MalformedIdentifier:
    """A version string that looks like a pseudo-version but isn't one."""

    identifier: str
    reason: str

    def __str__(self) -> str:
        return f"malformed version {self.identifier!r}: {self.reason}"


def _parse_timestamp(segment: str) -> datetime | None:
    if not _TIMESTAMP_RE.fullmatch(segment):
        return None
    try:
        parsed = datetime.strptime(segment, _TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=UTC)


def _release_base_tag(tag: str) -> str | None:
    """Undo the patch bump applied to pseudo-versions after a release tag.

    `go` advances the patch number past the last release tag when it builds a
    pseudo-version, so v1.2.4-0.<stamp>-<commit> sits on top of v1.2.3. The
    patch is floored at zero for tags like v1.2.0 that were never bumped.
    """
    parts = tag.split(".")
    if len(parts) < 3 or not parts[2].isdecimal():
        return None
    patch = max(int(parts[2]) - 1, 0)
    return f"{parts[0]}.{parts[1]}.{patch}"


def classify(identifier: str) -> Result[ParsedIdentifier, MalformedIdentifier]:
    """Classify a module version string.

    Args:
        identifier: The main module version, e.g. ``debug.BuildInfo.Main.Version``.

    Returns:
        Ok(variant) for every recognized layout, Err(MalformedIdentifier) when
        the pseudo-version timestamp or base tag cannot be recovered.
    """
    parts = identifier.split("-")
    tag = parts[0]
    n = len(parts)

    if n < 3:
        if tag == DEVEL_VERSION:
            return Ok(Devel())
        # `tag` is already split on "-"; two-segment versions land on Release.
        if "-" in tag:
            return Ok(PreRelease())
        return Ok(Release())

    commit_id = parts[-1]
    stamp = parts[-2]
    if len(stamp) < _TIMESTAMP_LEN:
        return _malformed(identifier, f"timestamp segment {stamp!r} is too short")

    commit_time = _parse_timestamp(stamp[-_TIMESTAMP_LEN:])
    if commit_time is None:
        return _malformed(identifier, f"timestamp segment {stamp!r} is not YYYYmmddHHMMSS")

    if len(stamp) == _TIMESTAMP_LEN:
        return Ok(PseudoUntagged(commit_id=commit_id, commit_time=commit_time))

    if len(stamp) == _TIMESTAMP_LEN + _RELEASE_MARKER_LEN:
        base_tag = _release_base_tag(tag)
        if base_tag is None:
            return _malformed(identifier, f"tag {tag!r} is not vMAJOR.MINOR.PATCH")
        return Ok(
            PseudoBaseRelease(base_tag=base_tag, commit_id=commit_id, commit_time=commit_time)
        )

    suffix_len = _PRERELEASE_MARKER_LEN + _TIMESTAMP_LEN + 1 + len(commit_id)
    return Ok(
        PseudoBasePreRelease(
            base_tag=identifier[: len(identifier) - suffix_len],
            commit_id=commit_id,
            commit_time=commit_time,
        )
    )


def _malformed(identifier: str, reason: str) -> Err[MalformedIdentifier]:
    logger.debug("cannot classify %r: %s", identifier, reason)
    return Err(MalformedIdentifier(identifier=identifier, reason=reason))


def base_tag_of(parsed: ParsedIdentifier) -> str | None:
    """The recovered base tag; only the two base-tag pseudo variants have one."""
    match parsed:
        case PseudoBaseRelease(base_tag=tag) | PseudoBasePreRelease(base_tag=tag):
            return tag
        case _:
            return None


def commit_id_of(parsed: ParsedIdentifier) -> str | None:
    if isinstance(parsed, _PSEUDO_VARIANTS):
        return parsed.commit_id
    return None


def commit_time_of(parsed: ParsedIdentifier) -> datetime | None:
    if isinstance(parsed, _PSEUDO_VARIANTS):
        return parsed.commit_time
    return None
