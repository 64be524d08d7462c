# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Quality gate deciding the build verdict from aggregated violations."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .build import BuildGraph
from .constants import BUILD_STEP, CHECK_CODE_QUALITY_ERRORS_STEP, GATE_BANNER
from .logging import detect_tty, ok, section, warn
from .models import AggregationResult, GateOutcome, ProjectNode
from .reports import ReportAggregator


class QualityGateFailure(RuntimeError):
    """Raised when aggregated violations fail the build."""

    def __init__(self, outcome: GateOutcome) -> None:
        super().__init__(outcome.summary_text)
        self.outcome = outcome


class QualityGate:
    """Pass iff no violation was aggregated."""

    banner = GATE_BANNER

    def decide(self, result: AggregationResult) -> GateOutcome:
        if result.is_empty():
            return GateOutcome(passed=True, summary_text="No rule violations found.", violation_count=0)
        lines = [self.banner, *(violation.render() for violation in result)]
        return GateOutcome(passed=False, summary_text="\n".join(lines), violation_count=len(result))

    def enforce(self, result: AggregationResult) -> GateOutcome:
        """Return the passing outcome or raise :class:`QualityGateFailure`."""

        outcome = self.decide(result)
        if not outcome.passed:
            raise QualityGateFailure(outcome)
        return outcome


def register_quality_gate(
    graph: BuildGraph,
    modules: Sequence[ProjectNode],
    tool_steps: Sequence[str],
    *,
    aggregator: ReportAggregator | None = None,
    gate: QualityGate | None = None,
    fail_on_violations: bool = True,
    use_emoji: bool = True,
    on_outcome: Callable[[GateOutcome], None] | None = None,
) -> str:
    """Register the single gate step that finalizes ``build``.

    The step depends on every tool step of every module, so it runs once all
    of them reached a terminal state. With ``fail_on_violations`` disabled the
    verdict is only reported.

    Returns:
        str: Name of the registered gate step.
    """

    aggregator = aggregator or ReportAggregator()
    gate = gate or QualityGate()

    def check_code_quality_errors() -> None:
        section("Code quality", use_color=detect_tty())
        outcome = gate.decide(aggregator.collect(modules))
        if on_outcome is not None:
            on_outcome(outcome)
        if outcome.passed:
            ok(outcome.summary_text, use_emoji=use_emoji)
            return
        if fail_on_violations:
            raise QualityGateFailure(outcome)
        warn(outcome.summary_text, use_emoji=use_emoji)

    graph.register(
        CHECK_CODE_QUALITY_ERRORS_STEP,
        check_code_quality_errors,
        depends_on=tool_steps,
        description="Fail build if any Checkstyle, Pmd or Findbugs error found.",
    )
    graph.ensure(BUILD_STEP)
    graph.finalize(BUILD_STEP, CHECK_CODE_QUALITY_ERRORS_STEP)
    return CHECK_CODE_QUALITY_ERRORS_STEP


__all__ = ["QualityGate", "QualityGateFailure", "register_quality_gate"]
