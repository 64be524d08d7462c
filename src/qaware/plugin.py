# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wire module traversal, tool configuration and the quality gate together."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from .build import BuildGraph, BuildResult
from .config import QualityConfig
from .configurator import CONFIGURATORS, ToolConfigurator, ToolSettings
from .constants import BUILD_STEP, CHECK_STEP, CHECKSTYLE
from .gate import register_quality_gate
from .logging import info
from .models import GateOutcome, ProjectNode, ToolRun, qualified_step
from .modules import ModuleWalker, build_module_tree
from .reports import ReportAggregator
from .resources import ResourceResolver
from .tools import AnalysisTool, CommandAnalysisTool, RecordingTool


def default_tools(config: QualityConfig) -> dict[str, AnalysisTool]:
    """Return command-backed engines for configured tools, recorders for the rest."""

    tools: dict[str, AnalysisTool] = {}
    for configurator in CONFIGURATORS:
        command = config.tool_commands.get(configurator.tool)
        if command:
            tools[configurator.tool] = CommandAnalysisTool(configurator.tool, command)
        else:
            tools[configurator.tool] = RecordingTool(configurator.tool)
    return tools


def load_project(root_dir: Path, config: QualityConfig) -> ProjectNode:
    """Build the module tree declared by *config* for the project at *root_dir*."""

    return build_module_tree(
        root_dir,
        config.modules,
        source_sets=config.source_sets,
        module_source_sets=config.module_source_sets,
    )


class QualityAwarePlugin:
    """Configure Checkstyle, PMD and FindBugs on every module of a project.

    ``apply`` is the configuration phase: it provisions rulesets and registers
    steps on the build graph. ``run`` is the execution phase.
    """

    def __init__(
        self,
        config: QualityConfig,
        *,
        tools: Mapping[str, AnalysisTool] | None = None,
        resolver: ResourceResolver | None = None,
        graph: BuildGraph | None = None,
        aggregator: ReportAggregator | None = None,
        use_emoji: bool = True,
    ) -> None:
        self.config = config
        self.tools = dict(tools) if tools is not None else default_tools(config)
        self.resolver = resolver or ResourceResolver()
        self.graph = graph or BuildGraph(use_emoji=use_emoji)
        self.aggregator = aggregator or ReportAggregator()
        self.walker = ModuleWalker()
        self.use_emoji = use_emoji
        self.runs: list[ToolRun] = []
        self.modules: list[ProjectNode] = []
        self.outcome: GateOutcome | None = None

    def settings_for(self, module: ProjectNode, tool: str) -> ToolSettings:
        """Compose the settings of *tool* for *module* from the root configuration."""

        return ToolSettings(
            tool_version=self.config.tool_version(tool),
            source_sets=module.source_sets,
            java_version=self.config.java_version,
            root_override=self.config.checkstyle_override_path if tool == CHECKSTYLE else None,
            module_override=self.config.module_override(module.path, tool),
            suppressions_override=self.config.checkstyle_suppressions_path if tool == CHECKSTYLE else None,
        )

    def configurators(self) -> list[ToolConfigurator]:
        return [
            factory(self.resolver, self.tools[factory.tool], use_emoji=self.use_emoji)
            for factory in CONFIGURATORS
            if factory.tool in self.tools
        ]

    def apply(self, root: ProjectNode) -> list[ToolRun]:
        """Register analysis steps for every leaf module and the quality gate."""

        build = self.graph.ensure(BUILD_STEP, description="Assemble and check every module")
        configurators = self.configurators()

        def configure_module(module: ProjectNode) -> None:
            self.modules.append(module)
            check = self.graph.ensure(qualified_step(module.path, CHECK_STEP))
            self.graph.depend(build.name, check.name)
            for configurator in configurators:
                settings = self.settings_for(module, configurator.tool)
                self.runs.extend(configurator.configure(module, settings, self.graph))

        self.walker.for_each_leaf(root, configure_module)
        info(
            f"Configured {len(self.runs)} analysis steps across {len(self.modules)} module(s)",
            use_emoji=self.use_emoji,
        )
        register_quality_gate(
            self.graph,
            self.modules,
            [run.step_name for run in self.runs],
            aggregator=self.aggregator,
            fail_on_violations=self.config.fail_on_violations,
            use_emoji=self.use_emoji,
            on_outcome=self._record_outcome,
        )
        return list(self.runs)

    def run(self, *targets: str) -> BuildResult:
        return self.graph.run(*(targets or (BUILD_STEP,)))

    def _record_outcome(self, outcome: GateOutcome) -> None:
        self.outcome = outcome


def apply_to_directory(
    root_dir: Path,
    config: QualityConfig,
    *,
    tools: Mapping[str, AnalysisTool] | None = None,
    use_emoji: bool = True,
) -> QualityAwarePlugin:
    """Load the project at *root_dir* and apply the plugin to it."""

    plugin = QualityAwarePlugin(config, tools=tools, use_emoji=use_emoji)
    plugin.apply(load_project(root_dir, config))
    return plugin


__all__ = ["QualityAwarePlugin", "apply_to_directory", "default_tools", "load_project"]
