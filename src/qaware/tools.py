# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analysis tool integrations invoked by the configured build steps.

The engines themselves are opaque: each one reads a ruleset plus source roots
and writes an XML report to ``ToolRun.xml_report``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .models import ProjectNode, ToolRun
from .process_utils import run_command


class ToolExecutionError(RuntimeError):
    """Raised when an analysis tool cannot be started."""


@runtime_checkable
class AnalysisTool(Protocol):
    """Contract for one analysis engine."""

    name: str

    def run(self, run: ToolRun, module: ProjectNode) -> int:
        """Analyse one source set and return the engine's exit status."""


def command_placeholders(run: ToolRun, module: ProjectNode) -> dict[str, str]:
    """Return the values available to command templates for *run*."""

    placeholders = {
        "tool": run.tool,
        "module": run.module_path,
        "module_dir": str(module.directory),
        "root_dir": str(module.root_dir),
        "source_set": run.source_set,
        "source_dir": str(module.source_dir(run.source_set)),
        "ruleset": str(run.ruleset.resolved or ""),
        "reports_dir": str(run.reports_dir),
        "xml_report": str(run.xml_report),
        "html_report": str(run.html_report),
        "tool_version": run.tool_version,
        "java_version": run.java_version or "",
    }
    placeholders.update(run.extra)
    return placeholders


@dataclass(slots=True)
class CommandAnalysisTool:
    """Run an engine through a command template such as ``["pmd", "-R", "{ruleset}"]``."""

    name: str
    command: Sequence[str]
    timeout: float | None = None

    def render(self, run: ToolRun, module: ProjectNode) -> list[str]:
        values = command_placeholders(run, module)
        try:
            return [part.format_map(values) for part in self.command]
        except KeyError as exc:
            raise ToolExecutionError(f"Unknown placeholder {exc} in {self.name} command") from exc

    def run(self, run: ToolRun, module: ProjectNode) -> int:
        source_dir = module.source_dir(run.source_set)
        if not source_dir.is_dir():
            # Nothing to analyse; the missing report is treated as zero violations.
            return 0
        args = self.render(run, module)
        run.reports_dir.mkdir(parents=True, exist_ok=True)
        try:
            completed = run_command(args, cwd=module.directory, check=False, timeout=self.timeout)
        except (FileNotFoundError, ValueError) as exc:
            raise ToolExecutionError(f"{self.name} could not be started: {exc}") from exc
        return completed.returncode


@dataclass(slots=True)
class RecordingTool:
    """Record requested runs without executing anything (dry runs, tests)."""

    name: str
    runs: list[ToolRun] = field(default_factory=list)

    def run(self, run: ToolRun, module: ProjectNode) -> int:
        del module
        self.runs.append(run)
        return 0


__all__ = [
    "AnalysisTool",
    "CommandAnalysisTool",
    "RecordingTool",
    "ToolExecutionError",
    "command_placeholders",
]
