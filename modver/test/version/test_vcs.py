"""Tests for modver.version.vcs module."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from modver.version.vcs import RepositoryMetadata, normalize

COMMIT_TIME = datetime(2023, 1, 5, 12, 0, 0, tzinfo=UTC)


class TestDefaults:
    def test_none(self) -> None:
        assert normalize(None) == RepositoryMetadata()

    def test_empty(self) -> None:
        meta = normalize([])
        assert meta.kind == "unknown"
        assert meta.revision == "unknown"
        assert meta.is_dirty is False
        assert meta.last_commit_time is None

    def test_unknown_keys_ignored(self) -> None:
        meta = normalize([("-compiler", "gc"), ("GOOS", "linux"), ("CGO_ENABLED", "1")])
        assert meta == RepositoryMetadata()

    def test_only_modified(self) -> None:
        meta = normalize({"vcs.modified": "true"})
        assert meta == RepositoryMetadata(
            kind="unknown", revision="unknown", is_dirty=True, last_commit_time=None
        )


class TestNormalize:
    def test_all_fields(self) -> None:
        meta = normalize(
            [
                ("-compiler", "gc"),
                ("vcs", "git"),
                ("vcs.revision", "abc123def4567890"),
                ("vcs.time", "2023-01-05T12:00:00Z"),
                ("vcs.modified", "false"),
            ]
        )
        assert meta == RepositoryMetadata(
            kind="git",
            revision="abc123def4567890",
            is_dirty=False,
            last_commit_time=COMMIT_TIME,
        )

    def test_later_duplicate_wins(self) -> None:
        meta = normalize(
            [
                ("vcs.revision", "first"),
                ("vcs.modified", "true"),
                ("vcs.revision", "second"),
                ("vcs.modified", "false"),
            ]
        )
        assert meta.revision == "second"
        assert meta.is_dirty is False

    @pytest.mark.parametrize("value", ["True", "TRUE", "1", "yes", "", "true "])
    def test_modified_requires_exact_true(self, value: str) -> None:
        assert normalize([("vcs.modified", value)]).is_dirty is False

    def test_offset_is_kept(self) -> None:
        meta = normalize([("vcs.time", "2023-01-05T14:00:00+02:00")])
        assert meta.last_commit_time == COMMIT_TIME
        assert meta.last_commit_time is not None
        assert meta.last_commit_time.utcoffset() == timedelta(hours=2)

    @pytest.mark.parametrize(
        "value",
        [
            "yesterday",
            "2023-01-05T12:00:00",  # no offset
            "2023-01-05",
            "2023-01-05 12:00:00Z",
            "2023-13-05T12:00:00Z",
        ],
    )
    def test_unparseable_time_keeps_previous(self, value: str) -> None:
        meta = normalize([("vcs.time", "2023-01-05T12:00:00Z"), ("vcs.time", value)])
        assert meta.last_commit_time == COMMIT_TIME

    def test_unparseable_time_alone_is_absent(self) -> None:
        assert normalize([("vcs.time", "not a time")]).last_commit_time is None


class TestToSettings:
    @pytest.mark.parametrize(
        "meta",
        [
            RepositoryMetadata(),
            RepositoryMetadata(kind="git", revision="abc", is_dirty=True),
            RepositoryMetadata(
                kind="hg",
                revision="0123",
                last_commit_time=datetime(2023, 1, 5, 12, 0, 0, 250000, tzinfo=UTC),
            ),
            RepositoryMetadata(
                kind="git",
                revision="abc",
                last_commit_time=datetime(2023, 1, 5, 9, 30, tzinfo=timezone(timedelta(hours=-5))),
            ),
        ],
    )
    def test_normalize_is_idempotent(self, meta: RepositoryMetadata) -> None:
        assert normalize(meta.to_settings()) == meta
        assert normalize(normalize(meta.to_settings()).to_settings()) == meta

    def test_encoding(self) -> None:
        meta = RepositoryMetadata(kind="git", revision="abc", is_dirty=True)
        assert meta.to_settings() == [
            ("vcs", "git"),
            ("vcs.revision", "abc"),
            ("vcs.modified", "true"),
        ]
