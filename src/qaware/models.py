# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the qaware package."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import BUILD_DIR_NAME, DEFAULT_SOURCE_SETS, REPORTS_DIR_NAME

ROOT_PATH = ":"


def qualified_step(module_path: str, name: str) -> str:
    """Return the graph-wide name of step *name* owned by *module_path*."""

    if module_path == ROOT_PATH:
        return f"{ROOT_PATH}{name}"
    return f"{module_path}:{name}"


def capitalize(value: str) -> str:
    """Upper-case the first character only (``integrationTest`` -> ``IntegrationTest``)."""

    return value[:1].upper() + value[1:]


class ProjectNode(BaseModel):
    """A node in the declared module hierarchy.

    Leaf nodes are directly buildable and receive tool configuration; grouping
    nodes only hold children. Nodes are immutable once the tree is built.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    directory: Path
    root_dir: Path
    children: tuple[ProjectNode, ...] = Field(default_factory=tuple)
    leaf: bool = True
    source_sets: tuple[str, ...] = DEFAULT_SOURCE_SETS

    @property
    def name(self) -> str:
        if self.is_root:
            return self.root_dir.name
        return self.path.rsplit(":", 1)[-1]

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_PATH

    @property
    def build_dir(self) -> Path:
        return self.directory / BUILD_DIR_NAME

    def reports_dir(self, tool: str) -> Path:
        """Return the directory *tool* writes its reports into for this module."""

        return self.build_dir / REPORTS_DIR_NAME / tool

    def source_dir(self, source_set: str) -> Path:
        return self.directory / "src" / source_set / "java"


class ResourceSpec(BaseModel):
    """A provisionable file addressed by its logical path in the bundled set."""

    model_config = ConfigDict(validate_assignment=True)

    logical_path: str
    override: str | None = None
    resolved: Path | None = None


class ToolRun(BaseModel):
    """Execution context of one analysis tool for one (module, source set) pair."""

    model_config = ConfigDict(validate_assignment=True)

    tool: str
    module_path: str
    source_set: str
    ruleset: ResourceSpec
    tool_version: str
    reports_dir: Path
    java_version: str | None = None
    ignore_failures: bool = True
    extra: dict[str, str] = Field(default_factory=dict)

    @field_validator("ignore_failures")
    @classmethod
    def _always_ignore_failures(cls, value: bool) -> bool:
        """Raw tool failures never abort the build; only the quality gate may."""
        if not value:
            raise ValueError("analysis tools must run with ignore_failures enabled")
        return value

    @property
    def xml_report(self) -> Path:
        return self.reports_dir / f"{self.source_set}.xml"

    @property
    def html_report(self) -> Path:
        return self.reports_dir / f"{self.source_set}.html"

    @property
    def step_name(self) -> str:
        return qualified_step(self.module_path, f"{self.tool}{capitalize(self.source_set)}")


class Violation(BaseModel):
    """Normalised report entry extracted from one tool's XML report."""

    model_config = ConfigDict(frozen=True)

    tool: str
    module: str
    source_set: str
    severity: str
    message: str
    file: str | None = None
    line: int | None = None
    rule: str | None = None

    @property
    def location(self) -> str | None:
        if self.file is None:
            return None
        if self.line is None:
            return self.file
        return f"{self.file}:{self.line}"

    def render(self) -> str:
        """Return the single-line human readable form used in gate summaries."""

        text = f"[{self.tool}] {self.module} ({self.source_set}) {self.severity}: {self.message}"
        location = self.location
        if location:
            text += f" [{location}]"
        if self.rule:
            text += f" ({self.rule})"
        return text


class AggregationResult(BaseModel):
    """Ordered violations accumulated across every module and tool of one build."""

    model_config = ConfigDict(validate_assignment=True)

    violations: list[Violation] = Field(default_factory=list)

    def add(self, violation: Violation) -> None:
        self.violations.append(violation)

    def extend(self, violations: Iterable[Violation]) -> None:
        self.violations.extend(violations)

    def is_empty(self) -> bool:
        return not self.violations

    def by_tool(self) -> dict[str, int]:
        """Return violation counts keyed by tool name."""
        return dict(Counter(violation.tool for violation in self.violations))

    def __len__(self) -> int:
        return len(self.violations)

    def __iter__(self) -> Iterator[Violation]:  # type: ignore[override]
        return iter(self.violations)


class GateOutcome(BaseModel):
    """Terminal verdict of the quality gate."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    summary_text: str
    violation_count: int = 0


ProjectNode.model_rebuild()

__all__ = [
    "ROOT_PATH",
    "AggregationResult",
    "GateOutcome",
    "ProjectNode",
    "ResourceSpec",
    "ToolRun",
    "Violation",
    "capitalize",
    "qualified_step",
]
