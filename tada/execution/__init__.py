"""Execution engine: plan gathering and the runner."""

from tada.execution.runner import AroundExecution, PlanNode, Runner, count_plan

__all__ = [
    "AroundExecution",
    "PlanNode",
    "Runner",
    "count_plan",
]
