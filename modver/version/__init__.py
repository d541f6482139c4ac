"""Version classification, VCS metadata and reporting."""

from modver.version.identifier import (
    Classification,
    Devel,
    MalformedIdentifier,
    ParsedIdentifier,
    PreRelease,
    PseudoBasePreRelease,
    PseudoBaseRelease,
    PseudoUntagged,
    Release,
    Unrecognized,
    base_tag_of,
    classify,
    commit_id_of,
    commit_time_of,
)
from modver.version.report import Report, Reporter, TemplateError, reconcile, remark_for
from modver.version.vcs import RepositoryMetadata, normalize

__all__ = [
    # identifier
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
    # report
    "Report",
    "Reporter",
    "TemplateError",
    "reconcile",
    "remark_for",
    # vcs
    "RepositoryMetadata",
    "normalize",
]
