"""Plan construction and execution.

The runner turns a suite tree into a flat, filtered, shuffled execution
plan, then walks it depth-first. Every plan node runs against its own fork
of the parent context. All error handling belongs to the formatter.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from tada.context import Context
from tada.step import Step
from tada.suite import LOCATION, AroundSuite, Suite, Test, WrapFn

if TYPE_CHECKING:
    from tada.reporting.formatter import Formatter


@dataclass
class AroundExecution:
    """Plan node: the gathered children of an around hook."""

    children: list[PlanNode]
    wrap: WrapFn
    suite: Suite

    @property
    def labels(self) -> dict[str, Any]:
        return self.suite.labels


PlanNode = Union[Test, AroundExecution]


def sort_key(node: Test | AroundSuite) -> str:
    """Base ordering applied before shuffling."""
    loc = node.labels.get(LOCATION)
    if loc is not None:
        return loc.absolute_path
    return str(node.labels.get("name"))


def count_plan(plan: list[PlanNode]) -> int:
    """Count every node in a plan, including nested around nodes."""
    total = 0
    for exe in plan:
        total += 1
        if isinstance(exe, AroundExecution):
            total += count_plan(exe.children)
    return total


class Runner:
    """Runs a suite through a formatter.

    Attributes:
        seed: Seed for the shuffle. A fixed seed and tree shape always
            produce the same order.
        file_filter: Absolute file paths whose tests should run, or None
            to run everything.
    """

    def __init__(
        self,
        suite: Suite,
        formatter: Formatter,
        seed: int = 0,
        file_filter: set[str] | None = None,
    ) -> None:
        self.suite = suite
        self.formatter = formatter
        self.seed = seed
        self.file_filter = file_filter

    def run(self, context: Context | None = None) -> None:
        """Build the plan and execute it.

        Returns once the whole plan has run. A failing step makes the
        formatter terminate the process instead.
        """
        if context is None:
            context = Context()

        plan = self.plan()
        self.formatter.prepare_execution(plan)
        self.run_executables(plan, context)
        self.formatter.finish_execution()

    def plan(self) -> list[PlanNode]:
        """Gather the execution plan using a generator seeded with ``seed``.

        The generator is private to this call, so the global ``random``
        state is neither consumed nor reseeded.
        """
        return self.gather(self.suite, random.Random(self.seed))

    def should_run_test(self, test: Test) -> bool:
        if self.file_filter is None:
            return True
        loc = test.labels.get(LOCATION)
        if loc is None:
            return True
        return loc.absolute_path in self.file_filter

    def gather(self, suite: Suite, rng: random.Random) -> list[PlanNode]:
        """Build the plan for one suite level.

        Children are first sorted by file so that insertion order does not
        affect the result, then shuffled with ``rng``. Around hooks whose
        gathered children are empty are dropped.
        """
        children = sorted(suite.children, key=sort_key)
        rng.shuffle(children)

        executables: list[PlanNode] = []
        for child in children:
            if isinstance(child, Test):
                if not self.should_run_test(child):
                    continue
                executables.append(child)
            elif isinstance(child, AroundSuite):
                sub_plan = self.gather(child.suite, rng)
                if sub_plan:
                    executables.append(AroundExecution(sub_plan, child.wrap, child.suite))
            else:
                raise TypeError(f"Unknown suite child: {child!r}")

        return executables

    def run_executables(self, executables: list[PlanNode], context: Context) -> None:
        for exe in executables:
            child_context = context.copy()

            if isinstance(exe, Test):
                self.formatter.run_test(exe, lambda: exe.step.call(child_context))
            elif isinstance(exe, AroundExecution):
                step = exe.wrap(self._inner_step(exe))
                self.formatter.run_suite(
                    exe.suite, lambda: step.call(child_context)
                )
            else:
                raise TypeError(f"Unknown plan node: {exe!r}")

    def _inner_step(self, exe: AroundExecution) -> Step:
        """Step that runs the children of ``exe`` against the given context."""

        def run_children(context: Context) -> None:
            self.formatter.run_children(
                exe.suite, lambda: self.run_executables(exe.children, context)
            )

        return Step(run_children, suite=exe.suite)
