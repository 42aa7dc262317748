"""Formatter interface used by the runner.

The runner calls ``prepare_execution`` once with the full plan, then hands
every test, suite and suite body to the formatter as a zero-argument
callable. A formatter must call each body exactly once and return its
value. It owns error reporting: an error escaping a body should end the
run rather than propagate back into the runner.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from tada.execution.runner import PlanNode
    from tada.suite import Suite, Test

Body = Callable[[], Any]


class Formatter:
    """Pass-through formatter. Subclasses override the hooks they need."""

    def prepare_execution(self, plan: list[PlanNode]) -> None:
        pass

    def run_test(self, test: Test, body: Body) -> Any:
        return body()

    def run_suite(self, suite: Suite, body: Body) -> Any:
        return body()

    def run_children(self, suite: Suite, body: Body) -> Any:
        return body()

    def finish_execution(self) -> None:
        pass
