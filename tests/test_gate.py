# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the quality gate verdict and its build registration."""

from __future__ import annotations

import pytest

from qaware.build import BuildGraph
from qaware.constants import GATE_BANNER
from qaware.gate import QualityGate, QualityGateFailure, register_quality_gate
from qaware.models import AggregationResult, GateOutcome, ProjectNode, Violation


def _violation(message: str, *, module: str = ":moduleA", tool: str = "checkstyle") -> Violation:
    return Violation(tool=tool, module=module, source_set="main", severity="error", message=message)


def test_empty_result_passes() -> None:
    outcome = QualityGate().decide(AggregationResult())

    assert outcome.passed is True
    assert outcome.violation_count == 0


def test_single_violation_fails_with_rendered_message() -> None:
    violation = _violation("Missing a Javadoc comment.")

    outcome = QualityGate().decide(AggregationResult(violations=[violation]))

    assert outcome.passed is False
    assert outcome.violation_count == 1
    assert violation.render() in outcome.summary_text
    assert "Missing a Javadoc comment." in outcome.summary_text


def test_summary_lists_banner_then_one_line_per_violation_in_order() -> None:
    result = AggregationResult(
        violations=[_violation("first"), _violation("second", tool="pmd"), _violation("third", module=":b")]
    )

    lines = QualityGate().decide(result).summary_text.splitlines()

    assert lines[0] == GATE_BANNER
    assert "Checkstyle" in lines[0] and "Pmd" in lines[0] and "Findbugs" in lines[0]
    assert [line.rsplit(": ", 1)[-1] for line in lines[1:]] == ["first", "second", "third"]


def test_violation_render_includes_location_and_rule() -> None:
    violation = Violation(
        tool="pmd",
        module=":core",
        source_set="test",
        severity="3",
        message="Avoid empty catch blocks",
        file="src/test/java/A.java",
        line=9,
        rule="Empty Code/EmptyCatchBlock",
    )

    assert violation.render() == (
        "[pmd] :core (test) 3: Avoid empty catch blocks [src/test/java/A.java:9] (Empty Code/EmptyCatchBlock)"
    )


def test_enforce_raises_with_outcome() -> None:
    with pytest.raises(QualityGateFailure) as excinfo:
        QualityGate().enforce(AggregationResult(violations=[_violation("boom")]))

    assert excinfo.value.outcome.passed is False
    assert "boom" in str(excinfo.value)


def test_registered_gate_depends_on_every_tool_step_and_finalizes_build(
    two_module_project: ProjectNode,
) -> None:
    graph = BuildGraph(use_emoji=False)
    graph.register(":moduleA:checkstyleMain")
    graph.register(":moduleB:pmdTest")
    graph.register("build", depends_on=[":moduleA:checkstyleMain", ":moduleB:pmdTest"])

    name = register_quality_gate(
        graph,
        list(two_module_project.children),
        [":moduleA:checkstyleMain", ":moduleB:pmdTest"],
    )

    gate_step = graph.step(name)
    assert gate_step.depends_on == [":moduleA:checkstyleMain", ":moduleB:pmdTest"]
    assert graph.step("build").finalized_by == [name]
    assert graph.execution_order("build")[-1] == name


def test_gate_failure_fails_the_build(two_module_project: ProjectNode, write_report, report_samples) -> None:
    write_report(two_module_project.children[0], "checkstyle", "main", report_samples["checkstyle"])
    graph = BuildGraph(use_emoji=False)
    outcomes: list[GateOutcome] = []
    register_quality_gate(graph, list(two_module_project.children), [], on_outcome=outcomes.append)

    result = graph.run("build")

    assert not result.succeeded
    failure = result.failure_for("checkCodeQualityErrors")
    assert failure is not None
    assert isinstance(failure.error, QualityGateFailure)
    assert outcomes[0].violation_count == 1


def test_disabled_gate_only_reports(two_module_project: ProjectNode, write_report, report_samples) -> None:
    write_report(two_module_project.children[0], "checkstyle", "main", report_samples["checkstyle"])
    graph = BuildGraph(use_emoji=False)
    outcomes: list[GateOutcome] = []
    register_quality_gate(
        graph,
        list(two_module_project.children),
        [],
        fail_on_violations=False,
        on_outcome=outcomes.append,
    )

    result = graph.run("build")

    assert result.succeeded
    assert outcomes[0].passed is False
