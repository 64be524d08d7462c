# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal host build model: named steps, explicit dependencies, finalizers.

Configuration registers steps and their edges; execution runs them in a
deterministic dependency order. Finalizers run after the step they finalize
even when something earlier failed, which is how the quality gate observes
every tool step before deciding the build result.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .logging import fail, info

StepAction = Callable[[], None]


class BuildConfigurationError(RuntimeError):
    """Raised for duplicate or unknown steps and dependency cycles."""


@dataclass
class BuildStep:
    """A unit of work in the build graph."""

    name: str
    action: StepAction | None = None
    depends_on: list[str] = field(default_factory=list)
    last_actions: list[StepAction] = field(default_factory=list)
    finalized_by: list[str] = field(default_factory=list)
    description: str = ""

    def execute(self) -> None:
        if self.action is not None:
            self.action()
        for action in self.last_actions:
            action()


@dataclass(frozen=True, slots=True)
class BuildFailure:
    step: str
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class BuildResult:
    """Outcome of executing a set of target steps."""

    executed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[BuildFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def failure_for(self, step: str) -> BuildFailure | None:
        return next((failure for failure in self.failures if failure.step == step), None)


class BuildGraph:
    """Registry of build steps with explicit ordering edges."""

    def __init__(self, *, use_emoji: bool = True) -> None:
        self._steps: dict[str, BuildStep] = {}
        self._use_emoji = use_emoji

    def __contains__(self, name: object) -> bool:
        return name in self._steps

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> list[BuildStep]:
        return list(self._steps.values())

    def register(
        self,
        name: str,
        action: StepAction | None = None,
        *,
        depends_on: Iterable[str] = (),
        description: str = "",
    ) -> BuildStep:
        """Register a new step; step names are unique across the graph."""

        if name in self._steps:
            raise BuildConfigurationError(f"Step '{name}' is already registered")
        step = BuildStep(name=name, action=action, depends_on=list(depends_on), description=description)
        self._steps[name] = step
        return step

    def ensure(self, name: str, *, description: str = "") -> BuildStep:
        """Return step *name*, registering an action-less lifecycle step if absent."""

        if name in self._steps:
            return self._steps[name]
        return self.register(name, description=description)

    def step(self, name: str) -> BuildStep:
        try:
            return self._steps[name]
        except KeyError as exc:
            raise BuildConfigurationError(f"Unknown step '{name}'") from exc

    def depend(self, name: str, *dependencies: str) -> None:
        """Make *name* run after every step in *dependencies*."""

        step = self.step(name)
        for dependency in dependencies:
            if dependency not in step.depends_on:
                step.depends_on.append(dependency)

    def do_last(self, name: str, action: StepAction) -> None:
        """Append *action* to run right after step *name*'s own action."""

        self.step(name).last_actions.append(action)

    def finalize(self, name: str, by: str) -> None:
        """Run step *by* after *name* whenever *name* is scheduled."""

        step = self.step(name)
        self.step(by)
        if by not in step.finalized_by:
            step.finalized_by.append(by)

    def execution_order(self, *targets: str) -> list[str]:
        """Return the steps needed for *targets*, dependencies first.

        Raises:
            BuildConfigurationError: On unknown steps or dependency cycles.
        """

        order: list[str] = []
        visiting: set[str] = set()
        done: set[str] = set()

        def visit(name: str, chain: tuple[str, ...]) -> None:
            if name in done:
                return
            if name in visiting:
                cycle = " -> ".join((*chain, name))
                raise BuildConfigurationError(f"Dependency cycle detected: {cycle}")
            step = self.step(name)
            visiting.add(name)
            for dependency in step.depends_on:
                visit(dependency, (*chain, name))
            visiting.discard(name)
            done.add(name)
            order.append(name)
            for finalizer in step.finalized_by:
                visit(finalizer, (*chain, name))

        for target in targets:
            visit(target, ())
        return order

    def finalizers(self) -> set[str]:
        return {name for step in self._steps.values() for name in step.finalized_by}

    def run(self, *targets: str) -> BuildResult:
        """Execute *targets* sequentially and collect failures.

        After the first failure only finalizer steps still run.
        """

        order = self.execution_order(*targets)
        finalizers = self.finalizers()
        result = BuildResult()
        for name in order:
            if result.failures and name not in finalizers:
                result.skipped.append(name)
                continue
            step = self._steps[name]
            info(f"> {name}", use_emoji=self._use_emoji)
            try:
                step.execute()
            except Exception as exc:  # noqa: BLE001 - failures are reported through the result
                fail(f"Step {name} failed: {exc}", use_emoji=self._use_emoji)
                result.failures.append(BuildFailure(step=name, error=exc))
            result.executed.append(name)
        return result


__all__ = [
    "BuildConfigurationError",
    "BuildFailure",
    "BuildGraph",
    "BuildResult",
    "BuildStep",
    "StepAction",
]
