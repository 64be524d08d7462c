# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for command-backed analysis engines."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from qaware import tools as tools_module
from qaware.models import ProjectNode, ResourceSpec, ToolRun
from qaware.modules import build_module_tree
from qaware.tools import AnalysisTool, CommandAnalysisTool, RecordingTool, ToolExecutionError, command_placeholders


@pytest.fixture
def module(tmp_path: Path) -> ProjectNode:
    return build_module_tree(tmp_path, ["core"]).children[0]


@pytest.fixture
def run(module: ProjectNode) -> ToolRun:
    return ToolRun(
        tool="pmd",
        module_path=module.path,
        source_set="main",
        ruleset=ResourceSpec(logical_path="pmd/pmd-rules-general.xml", resolved=module.root_dir / "rules.xml"),
        tool_version="5.8.1",
        java_version="1.8",
        reports_dir=module.reports_dir("pmd"),
        extra={"html_enabled": "false"},
    )


def test_placeholders_expose_run_and_extra_values(run: ToolRun, module: ProjectNode) -> None:
    values = command_placeholders(run, module)

    assert values["source_dir"] == str(module.directory / "src" / "main" / "java")
    assert values["xml_report"] == str(module.reports_dir("pmd") / "main.xml")
    assert values["ruleset"] == str(module.root_dir / "rules.xml")
    assert values["html_enabled"] == "false"


def test_render_substitutes_placeholders(run: ToolRun, module: ProjectNode) -> None:
    tool = CommandAnalysisTool("pmd", ["pmd", "-d", "{source_dir}", "-R", "{ruleset}", "-r", "{xml_report}"])

    assert tool.render(run, module) == [
        "pmd",
        "-d",
        str(module.source_dir("main")),
        "-R",
        str(module.root_dir / "rules.xml"),
        "-r",
        str(run.xml_report),
    ]


def test_render_rejects_unknown_placeholder(run: ToolRun, module: ProjectNode) -> None:
    tool = CommandAnalysisTool("pmd", ["pmd", "{classpath}"])

    with pytest.raises(ToolExecutionError, match="classpath"):
        tool.render(run, module)


def test_missing_source_dir_skips_engine(
    run: ToolRun, module: ProjectNode, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _unexpected(*_args: object, **_kwargs: object) -> None:
        raise AssertionError("engine should not start")

    monkeypatch.setattr(tools_module, "run_command", _unexpected)

    assert CommandAnalysisTool("pmd", ["pmd"]).run(run, module) == 0
    assert not run.reports_dir.exists()


def test_run_returns_engine_status(run: ToolRun, module: ProjectNode, monkeypatch: pytest.MonkeyPatch) -> None:
    module.source_dir("main").mkdir(parents=True)
    calls: list[tuple[list[str], Path | None]] = []

    def _fake_run(args, *, cwd=None, check=True, timeout=None, **_kwargs):
        calls.append((list(args), cwd))
        assert check is False
        return subprocess.CompletedProcess(args=args, returncode=4, stdout="", stderr="")

    monkeypatch.setattr(tools_module, "run_command", _fake_run)

    status = CommandAnalysisTool("pmd", ["pmd", "{source_set}"]).run(run, module)

    assert status == 4
    assert calls == [(["pmd", "main"], module.directory)]
    assert run.reports_dir.is_dir()


def test_unstartable_engine_raises_tool_error(
    run: ToolRun, module: ProjectNode, monkeypatch: pytest.MonkeyPatch
) -> None:
    module.source_dir("main").mkdir(parents=True)

    def _missing(*_args: object, **_kwargs: object) -> None:
        raise FileNotFoundError("Executable 'pmd' was not found on PATH")

    monkeypatch.setattr(tools_module, "run_command", _missing)

    with pytest.raises(ToolExecutionError, match="could not be started"):
        CommandAnalysisTool("pmd", ["pmd"]).run(run, module)


def test_recording_tool_satisfies_protocol(run: ToolRun, module: ProjectNode) -> None:
    recorder = RecordingTool("pmd")

    assert isinstance(recorder, AnalysisTool)
    assert recorder.run(run, module) == 0
    assert recorder.runs == [run]
