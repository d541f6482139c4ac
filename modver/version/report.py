"""Combine a classified version with VCS metadata and render it.

Usage:
    reporter = Reporter(GoBinarySource(Path("./app")))
    match reporter.write(sys.stdout):
        case Ok():
            pass
        case Err(e):
            print(f"error: {e}")

The brief line is always rendered. The detail block is rendered only for
builds that are not an exact release or pre-release tag.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, TextIO

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError

from modver.buildinfo.model import BuildInfoError, BuildInfoSource
from modver.core.config import Config
from modver.core.result import Err, Ok, Result
from modver.logging import get_logger

from .identifier import (
    Devel,
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
from .vcs import RepositoryMetadata, normalize

if TYPE_CHECKING:
    from jinja2 import Template

__all__ = [
    "Report",
    "ReportError",
    "Reporter",
    "TemplateError",
    "reconcile",
    "remark_for",
    "template_context",
]

logger = get_logger("report")

# Python errors raised by expressions inside a user template
_RENDER_ERRORS = (ArithmeticError, LookupError, TypeError, ValueError, AttributeError)

UNKNOWN_TIME = "unknown"


@dataclass(frozen=True, slots=True)
class TemplateError:
    """A brief or detail template failed to compile or render."""

    template: str
    message: str

    def __str__(self) -> str:
        return f"{self.template} template error: {self.message}"


type ReportError = BuildInfoError | TemplateError


@dataclass(frozen=True, slots=True)
class Report:
    """Everything the templates can show about one build."""

    app_name: str
    module_path: str
    app_version: str
    toolchain_version: str
    parsed: ParsedIdentifier
    metadata: RepositoryMetadata
    remark: str | None

    @property
    def needs_detail(self) -> bool:
        """False for exact tags: their settings carry nothing worth showing."""
        return not isinstance(self.parsed, Release | PreRelease)


def reconcile(parsed: ParsedIdentifier, metadata: RepositoryMetadata) -> RepositoryMetadata:
    """Prefer the commit encoded in a pseudo-version over the VCS settings."""
    commit_id = commit_id_of(parsed)
    commit_time = commit_time_of(parsed)
    if commit_id is None or commit_time is None:
        return metadata
    return replace(metadata, revision=commit_id, last_commit_time=commit_time)


def remark_for(parsed: ParsedIdentifier, metadata: RepositoryMetadata) -> str | None:
    """Describe why a build is not a clean release; None for exact tags."""
    match parsed:
        case Release() | PreRelease():
            return None
        case Unrecognized():
            return "unknown branch"
        case Devel():
            return "dirty working copy" if metadata.is_dirty else "clean working copy"
        case PseudoUntagged():
            return "untagged branch"
        case PseudoBaseRelease(base_tag=tag) | PseudoBasePreRelease(base_tag=tag):
            return f"branch based on tag {tag}"


def _format_time(value: datetime | None, time_format: str) -> str:
    if value is None:
        return UNKNOWN_TIME
    return value.astimezone().strftime(time_format)


def template_context(report: Report, time_format: str) -> dict[str, object]:
    """Flatten a report into the variables templates see."""
    meta = report.metadata
    return {
        "app_name": report.app_name,
        "module_path": report.module_path,
        "app_version": report.app_version,
        "toolchain_version": report.toolchain_version,
        "classification": str(report.parsed.kind),
        "base_tag": base_tag_of(report.parsed),
        "commit_id": commit_id_of(report.parsed),
        "tag_remarks": report.remark or "",
        "vcs": meta.kind,
        "revision": meta.revision,
        "is_dirty": meta.is_dirty,
        "last_commit": meta.last_commit_time,
        "commit_time": _format_time(meta.last_commit_time, time_format),
    }


class Reporter:
    """Builds and renders version reports for one program.

    The build-info source is the only way the reporter learns about the
    program, so tests can hand it a `StaticSource`.
    """

    def __init__(self, source: BuildInfoSource, config: Config | None = None) -> None:
        self._source = source
        self._config = config or Config()
        self._env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def report(self, version: str | None = None) -> Result[Report, BuildInfoError]:
        """Classify and reconcile the program's build info.

        Args:
            version: Version string to classify instead of the embedded one.
                Empty or None uses the embedded main module version.
        """
        info_result = self._source.read()
        if isinstance(info_result, Err):
            return info_result
        info = info_result.value

        identifier = version or info.main_version
        classified = classify(identifier)
        parsed: ParsedIdentifier
        if isinstance(classified, Ok):
            parsed = classified.value
        else:
            logger.debug("%s", classified.error)
            parsed = Unrecognized(identifier=identifier)

        metadata = reconcile(parsed, normalize(info.settings))
        return Ok(
            Report(
                app_name=info.app_name,
                module_path=info.module_path,
                app_version=info.main_version,
                toolchain_version=info.toolchain_version,
                parsed=parsed,
                metadata=metadata,
                remark=remark_for(parsed, metadata),
            )
        )

    def _compile(self, name: str, source: str) -> Result[Template, TemplateError]:
        try:
            return Ok(self._env.from_string(source))
        except JinjaTemplateError as e:
            return Err(TemplateError(template=name, message=str(e)))

    def render(
        self,
        report: Report,
        brief: str | None = None,
        detail: str | None = None,
    ) -> Result[str, TemplateError]:
        """Render the brief line, plus the detail block when the build needs one.

        Args:
            report: The report to render.
            brief: jinja2 template overriding the configured brief template.
            detail: jinja2 template overriding the configured detail template.
        """
        templates = self._config.templates
        context = template_context(report, self._config.display.time_format)

        sections = [("brief", brief or templates.brief)]
        if report.needs_detail:
            sections.append(("detail", detail or templates.detail))

        chunks: list[str] = []
        for name, source in sections:
            compiled = self._compile(name, source)
            if isinstance(compiled, Err):
                return compiled
            try:
                chunks.append(compiled.value.render(context))
            except JinjaTemplateError as e:
                return Err(TemplateError(template=name, message=str(e)))
            except _RENDER_ERRORS as e:
                return Err(TemplateError(template=name, message=f"{type(e).__name__}: {e}"))

        return Ok("".join(chunks))

    def write(
        self,
        stream: TextIO,
        brief: str | None = None,
        detail: str | None = None,
        *,
        version: str | None = None,
    ) -> Result[None, ReportError]:
        """Report on the program and write the rendered text to `stream`.

        Nothing is written when the templates fail to render.
        """
        report = self.report(version)
        if isinstance(report, Err):
            return report

        rendered = self.render(report.value, brief, detail)
        if isinstance(rendered, Err):
            return rendered

        stream.write(rendered.value)
        return Ok(None)
