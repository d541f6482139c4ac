from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from modver.cli.context import CLIContext
from modver.core.config import Config, TemplatesConfig
from modver.core.errors import ErrorCode
from modver.output.console import MockConsole

SNAPSHOT = """\
path = "github.com/acme/app"
version = "v1.2.4-0.20230105120000-abc123def456"
go_version = "go1.21.5"

[[setting]]
key = "vcs"
value = "git"

[[setting]]
key = "vcs.revision"
value = "ffffffffffff0000"

[[setting]]
key = "vcs.modified"
value = "true"
"""


def _ctx(config: Config | None = None) -> CLIContext:
    return CLIContext(config=config or Config(), console=MockConsole())


def _console(ctx: CLIContext) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


def _snapshot(tmp_path: Path, text: str = SNAPSHOT) -> Path:
    path = tmp_path / "app.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestClassify:
    def test_prints_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.classify_cmd as classify_cmd

        ctx = _ctx()
        monkeypatch.setattr(classify_cmd, "build_context", lambda: ctx)

        classify_cmd.classify_version(
            identifier="v1.2.4-0.20230105120000-abc123def456", as_json=False
        )

        assert _console(ctx).messages == [
            "version: v1.2.4-0.20230105120000-abc123def456",
            "classification: pseudo-base-release",
            "base tag: v1.2.3",
            "commit id: abc123def456",
            "commit time: 2023-01-05T12:00:00+00:00",
        ]

    def test_release_has_no_commit_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.classify_cmd as classify_cmd

        ctx = _ctx()
        monkeypatch.setattr(classify_cmd, "build_context", lambda: ctx)

        classify_cmd.classify_version(identifier="v1.2.3", as_json=False)

        assert _console(ctx).messages == ["version: v1.2.3", "classification: release"]

    def test_json(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        import modver.cli.commands.classify_cmd as classify_cmd

        monkeypatch.setattr(classify_cmd, "build_context", lambda: _ctx())

        classify_cmd.classify_version(identifier="v0.0.0-20230105120000-abc", as_json=True)

        data = json.loads(capsys.readouterr().out)
        assert data == {
            "version": "v0.0.0-20230105120000-abc",
            "classification": "pseudo-untagged",
            "base_tag": None,
            "commit_id": "abc",
            "commit_time": "2023-01-05T12:00:00+00:00",
        }

    def test_malformed_exits_with_user_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.classify_cmd as classify_cmd

        ctx = _ctx()
        monkeypatch.setattr(classify_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            classify_cmd.classify_version(identifier="garbage-short-id", as_json=False)

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert _console(ctx).has_error()


class TestShow:
    def test_snapshot_report(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        monkeypatch.setattr(show_cmd, "build_context", lambda: _ctx())

        show_cmd.show(
            binary=None,
            snapshot=_snapshot(tmp_path),
            version=None,
            brief=None,
            detail=None,
        )

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "app version v1.2.4-0.20230105120000-abc123def456, built with go1.21.5"
        assert "Revision id: abc123def456" in out
        assert "VCS:         git" in out

    def test_template_files(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        monkeypatch.setattr(show_cmd, "build_context", lambda: _ctx())
        brief = tmp_path / "brief.j2"
        brief.write_text("{{ app_name }} {{ classification }}\n", encoding="utf-8")

        show_cmd.show(
            binary=None,
            snapshot=_snapshot(tmp_path),
            version="v1.2.3",
            brief=brief,
            detail=None,
        )

        assert capsys.readouterr().out == "app release\n"

    def test_configured_template_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        ctx = _ctx(Config(templates=TemplatesConfig(brief="{{ nope }}")))
        monkeypatch.setattr(show_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            show_cmd.show(
                binary=None, snapshot=_snapshot(tmp_path), version=None, brief=None, detail=None
            )

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert _console(ctx).find("brief template error")

    def test_template_runtime_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        ctx = _ctx()
        monkeypatch.setattr(show_cmd, "build_context", lambda: ctx)
        brief = tmp_path / "brief.j2"
        brief.write_text("{{ 1 // 0 }}\n", encoding="utf-8")

        with pytest.raises(typer.Exit) as exc:
            show_cmd.show(
                binary=None, snapshot=_snapshot(tmp_path), version=None, brief=brief, detail=None
            )

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert _console(ctx).find("ZeroDivisionError")

    def test_missing_snapshot(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        ctx = _ctx()
        monkeypatch.setattr(show_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            show_cmd.show(
                binary=None,
                snapshot=tmp_path / "missing.toml",
                version=None,
                brief=None,
                detail=None,
            )

        assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)

    def test_missing_template_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        monkeypatch.setattr(show_cmd, "build_context", lambda: _ctx())

        with pytest.raises(typer.Exit) as exc:
            show_cmd.show(
                binary=None,
                snapshot=_snapshot(tmp_path),
                version=None,
                brief=tmp_path / "nope.j2",
                detail=None,
            )

        assert exc.value.exit_code == int(ErrorCode.IO_ERROR)

    @pytest.mark.parametrize("both", [True, False])
    def test_needs_exactly_one_source(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, both: bool
    ) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        ctx = _ctx()
        monkeypatch.setattr(show_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            show_cmd.show(
                binary=tmp_path / "app" if both else None,
                snapshot=_snapshot(tmp_path) if both else None,
                version=None,
                brief=None,
                detail=None,
            )

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert _console(ctx).has_error()


class TestVcs:
    def test_prints_raw_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.show_cmd as show_cmd

        ctx = _ctx()
        monkeypatch.setattr(show_cmd, "build_context", lambda: ctx)

        show_cmd.vcs(binary=None, snapshot=_snapshot(tmp_path))

        # not reconciled with the pseudo-version
        assert _console(ctx).messages == [
            "vcs: git",
            "revision: ffffffffffff0000",
            "modified: true",
            "commit time: unknown",
        ]


class TestSnapshot:
    def test_writes_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import modver.cli.commands.snapshot_cmd as snapshot_cmd
        from modver.buildinfo.model import BuildInfo, BuildInfoError
        from modver.core.result import Ok, Result

        info = BuildInfo(
            module_path="github.com/acme/app",
            main_version="(devel)",
            toolchain_version="go1.21.5",
            settings=(("vcs", "git"),),
        )

        class FakeSource:
            def __init__(self, binary: Path, **_: object) -> None:
                self.binary = binary

            def read(self) -> Result[BuildInfo, BuildInfoError]:
                return Ok(info)

        monkeypatch.setattr(snapshot_cmd, "build_context", lambda: _ctx())
        monkeypatch.setattr(snapshot_cmd, "GoBinarySource", FakeSource)

        output = tmp_path / "out.toml"
        snapshot_cmd.snapshot(binary=tmp_path / "app", output=output)

        text = output.read_text(encoding="utf-8")
        assert 'path = "github.com/acme/app"' in text
        assert 'value = "git"' in text


class TestContext:
    def test_explicit_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from modver.cli.context import CONFIG_ENV, build_context

        path = tmp_path / "custom.toml"
        path.write_text('[go]\nexecutable = "go1.22"\n', encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV, str(path))

        assert build_context().config.go.executable == "go1.22"

    def test_config_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from modver.cli.context import CONFIG_ENV, build_context

        monkeypatch.delenv(CONFIG_ENV, raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "modver.toml").write_text('[display]\ntime_format = "%Y"\n', encoding="utf-8")

        assert build_context().config.display.time_format == "%Y"

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from modver.cli.context import CONFIG_ENV, build_context

        monkeypatch.delenv(CONFIG_ENV, raising=False)
        monkeypatch.chdir(tmp_path)

        assert build_context().config == Config()

    def test_broken_config_exits(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from modver.cli.context import CONFIG_ENV, build_context

        path = tmp_path / "modver.toml"
        path.write_text("[go\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV, str(path))

        with pytest.raises(typer.Exit) as exc:
            build_context()
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    from modver import __version__
    from modver.cli.app import _print_version  # pyright: ignore[reportPrivateUsage]

    with pytest.raises(typer.Exit):
        _print_version(True)
    assert capsys.readouterr().out.strip() == __version__
