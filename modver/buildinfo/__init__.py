"""Build info sources.

Usage:
    from modver.buildinfo import GoBinarySource

    match GoBinarySource(Path("./app")).read():
        case Ok(info):
            print(info.module_path, info.main_version)
        case Err(e):
            print(f"error: {e}")
"""

from modver.buildinfo.goversion import GoBinarySource, parse_go_version_output
from modver.buildinfo.model import BuildInfo, BuildInfoError, BuildInfoSource, StaticSource
from modver.buildinfo.snapshot import SnapshotSource, dump_snapshot, load_snapshot

__all__ = [
    "BuildInfo",
    "BuildInfoError",
    "BuildInfoSource",
    "GoBinarySource",
    "SnapshotSource",
    "StaticSource",
    "dump_snapshot",
    "load_snapshot",
    "parse_go_version_output",
]
