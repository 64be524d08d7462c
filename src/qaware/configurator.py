# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-module configuration of the Checkstyle, PMD and FindBugs steps."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import ClassVar

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .build import BuildGraph
from .constants import (
    CHECK_STEP,
    CHECKSTYLE,
    CHECKSTYLE_RULES,
    CHECKSTYLE_STYLESHEET,
    CHECKSTYLE_SUPPRESSIONS,
    DEFAULT_SOURCE_SETS,
    FINDBUGS,
    FINDBUGS_EXCLUDE,
    FINDBUGS_STYLESHEET,
    PMD,
    PMD_RULES,
    PMD_STYLESHEET,
)
from .logging import warn
from .models import ProjectNode, ResourceSpec, ToolRun, capitalize, qualified_step
from .resources import ResourceResolver
from .tools import AnalysisTool, ToolExecutionError


class ToolSettings(BaseModel):
    """Settings applied to one tool in one module."""

    model_config = ConfigDict(validate_assignment=True)

    tool_version: str
    source_sets: tuple[str, ...] = DEFAULT_SOURCE_SETS
    ignore_failures: bool = True
    java_version: str | None = None
    root_override: str | None = None
    module_override: str | None = None
    suppressions_override: str | None = None
    options: dict[str, str] = Field(default_factory=dict)

    @field_validator("ignore_failures")
    @classmethod
    def _always_ignore_failures(cls, value: bool) -> bool:
        if not value:
            raise ValueError("ignore_failures cannot be disabled; the quality gate decides fatality")
        return value

    def ruleset_override(self) -> str | None:
        """Return the override to honour: root project first, then module-local."""
        return self.root_override or self.module_override or None


def render_html_report(xml_report: Path, html_report: Path, stylesheet: Path) -> Path:
    """Transform *xml_report* into *html_report* using the XSLT *stylesheet*."""

    transform = etree.XSLT(etree.parse(str(stylesheet)))
    document = transform(etree.parse(str(xml_report)))
    html_report.parent.mkdir(parents=True, exist_ok=True)
    html_report.write_bytes(bytes(document))
    return html_report


class ToolConfigurator:
    """Register the analysis steps of one tool for a module.

    Every source set gets a ``<tool><SourceSet>`` step running the engine with
    failures ignored, followed by an HTML rendering action that only runs when
    the XML report exists. Native HTML output of the engines is disabled so the
    stylesheet-rendered file is the only artifact at ``<source_set>.html``.
    """

    tool: ClassVar[str]
    ruleset_resource: ClassVar[str]
    stylesheet_resource: ClassVar[str]

    def __init__(self, resolver: ResourceResolver, engine: AnalysisTool, *, use_emoji: bool = True) -> None:
        self.resolver = resolver
        self.engine = engine
        self.use_emoji = use_emoji

    def report_options(self) -> dict[str, str]:
        return {"xml_enabled": "true", "html_enabled": "false"}

    def extra_files(self, module: ProjectNode, settings: ToolSettings, ruleset: ResourceSpec) -> dict[str, str]:
        del module, settings, ruleset
        return {}

    def configure(self, module: ProjectNode, settings: ToolSettings, graph: BuildGraph) -> list[ToolRun]:
        """Register this tool's steps for *module* and return the planned runs."""

        ruleset = self.resolver.resolve_spec(
            module,
            ResourceSpec(logical_path=self.ruleset_resource, override=settings.ruleset_override()),
        )
        stylesheet = self.resolver.resolve(module, self.stylesheet_resource)
        extra = {
            **self.report_options(),
            **self.extra_files(module, settings, ruleset),
            "html_stylesheet": str(stylesheet),
            **settings.options,
        }
        check_step = graph.ensure(
            qualified_step(module.path, CHECK_STEP),
            description=f"Run all analysis steps of {module.path}",
        )

        runs: list[ToolRun] = []
        for source_set in settings.source_sets:
            run = ToolRun(
                tool=self.tool,
                module_path=module.path,
                source_set=source_set,
                ruleset=ruleset,
                tool_version=settings.tool_version,
                java_version=settings.java_version,
                ignore_failures=settings.ignore_failures,
                reports_dir=module.reports_dir(self.tool),
                extra=dict(extra),
            )
            graph.register(
                run.step_name,
                partial(self._execute, run, module),
                description=f"Run {capitalize(self.tool)} analysis for {source_set} classes",
            )
            graph.do_last(run.step_name, partial(self._render_html, run, stylesheet))
            graph.depend(check_step.name, run.step_name)
            runs.append(run)
        return runs

    def _execute(self, run: ToolRun, module: ProjectNode) -> None:
        try:
            status = self.engine.run(run, module)
        except (ToolExecutionError, OSError) as exc:
            warn(f"{run.step_name}: {exc} (ignored)", use_emoji=self.use_emoji)
            return
        if status:
            warn(f"{run.step_name}: {self.tool} exited with status {status} (ignored)", use_emoji=self.use_emoji)

    def _render_html(self, run: ToolRun, stylesheet: Path) -> None:
        if not run.xml_report.is_file():
            return
        try:
            render_html_report(run.xml_report, run.html_report, stylesheet)
        except etree.LxmlError as exc:
            # The aggregator reports unreadable XML; the HTML copy is cosmetic.
            warn(f"{run.step_name}: could not render {run.html_report.name}: {exc}", use_emoji=self.use_emoji)


class CheckstyleConfigurator(ToolConfigurator):
    tool = CHECKSTYLE
    ruleset_resource = CHECKSTYLE_RULES
    stylesheet_resource = CHECKSTYLE_STYLESHEET

    def extra_files(self, module: ProjectNode, settings: ToolSettings, ruleset: ResourceSpec) -> dict[str, str]:
        del ruleset
        suppressions = self.resolver.resolve(module, CHECKSTYLE_SUPPRESSIONS, settings.suppressions_override)
        return {"suppressions_file": str(suppressions)}


class PmdConfigurator(ToolConfigurator):
    tool = PMD
    ruleset_resource = PMD_RULES
    stylesheet_resource = PMD_STYLESHEET


class FindbugsConfigurator(ToolConfigurator):
    tool = FINDBUGS
    ruleset_resource = FINDBUGS_EXCLUDE
    stylesheet_resource = FINDBUGS_STYLESHEET

    def report_options(self) -> dict[str, str]:
        # FindBugs cannot emit XML and HTML together.
        return {"xml_enabled": "true", "xml_with_messages": "true", "html_enabled": "false"}

    def extra_files(self, module: ProjectNode, settings: ToolSettings, ruleset: ResourceSpec) -> dict[str, str]:
        del module, settings
        # The exclude filter is this tool's ruleset.
        return {"exclude_filter": str(ruleset.resolved)}


CONFIGURATORS: tuple[type[ToolConfigurator], ...] = (
    CheckstyleConfigurator,
    PmdConfigurator,
    FindbugsConfigurator,
)

__all__ = [
    "CONFIGURATORS",
    "CheckstyleConfigurator",
    "FindbugsConfigurator",
    "PmdConfigurator",
    "ToolConfigurator",
    "ToolSettings",
    "render_html_report",
]
