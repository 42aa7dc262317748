"""Suite tree construction.

A suite holds an ordered list of children: ``Test`` leaves and
``AroundSuite`` nodes, the latter wrapping a nested suite with
setup/teardown behavior. Every node carries a labels dict that always
includes ``__location``, the declaring call site.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable

from tada.errors import MissingWrapError
from tada.step import Step, chain

LOCATION = "__location"

WrapFn = Callable[[Step], Step]


@dataclass(frozen=True)
class Location:
    """File and line where a tree node was declared."""

    absolute_path: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.absolute_path}:{self.lineno}"

    def relative_to(self, base: str) -> str:
        return f"{os.path.relpath(self.absolute_path, base)}:{self.lineno}"


def caller_location(depth: int = 1) -> Location:
    """Return the location of the frame ``depth`` levels above the caller."""
    frame = sys._getframe(depth + 1)
    return Location(os.path.abspath(frame.f_code.co_filename), frame.f_lineno)


def annotate_labels(**labels: Any) -> dict[str, Any]:
    """Stamp ``__location`` with the call site two frames up, unless given.

    Called from a suite-building method, this records the line of user code
    that called that method.
    """
    if not labels.get(LOCATION):
        labels[LOCATION] = caller_location(2)
    return labels


@dataclass
class Test:
    """Leaf node: a labeled step."""

    __test__ = False

    labels: dict[str, Any]
    step: Step


@dataclass
class AroundSuite:
    """Node wrapping ``suite`` with the behavior produced by ``wrap``."""

    suite: Suite
    wrap: WrapFn

    @property
    def labels(self) -> dict[str, Any]:
        return self.suite.labels


class Suite:
    """Ordered tree of tests and around hooks."""

    def __init__(self, labels: dict[str, Any] | None = None) -> None:
        self.labels: dict[str, Any] = labels if labels is not None else {}
        self.children: list[Test | AroundSuite] = []

    def __enter__(self) -> Suite:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None

    def __repr__(self) -> str:
        return f"<Suite labels={self.labels!r} children={len(self.children)}>"

    def test(self, name: str, step: Step, **labels: Any) -> Test:
        """Append a test leaf named ``name`` running ``step``."""
        labels = annotate_labels(name=name, **labels)
        node = Test(labels, step)
        self.children.append(node)
        return node

    def with_around(self, wrap: WrapFn | None, **labels: Any) -> Suite:
        """Wrap a new child suite with ``wrap``.

        Args:
            wrap: Given a step that runs the wrapped subtree, returns the
                step to run in its place (setup, inner, teardown).
            **labels: Labels for the child suite.

        Returns:
            The child suite, to which further tests and hooks can be added.

        Raises:
            MissingWrapError: If ``wrap`` is not callable.
        """
        if not callable(wrap):
            raise MissingWrapError("wrapping function required")
        child = Suite(annotate_labels(**labels))
        self.children.append(AroundSuite(child, wrap))
        return child

    def with_before(self, before: Step, **labels: Any) -> Suite:
        """Run ``before`` ahead of everything in the returned child suite."""
        return self.with_around(lambda inner: chain(before, inner), **annotate_labels(**labels))

    def with_after(self, after: Step, **labels: Any) -> Suite:
        """Run ``after`` once everything in the returned child suite is done."""
        return self.with_around(lambda inner: chain(inner, after), **annotate_labels(**labels))
