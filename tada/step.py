"""Executable steps and the chaining combinator.

A step is a body (a callable taking a Context) plus a dict of static
options. Steps carry an assertion counter that the assertion helpers
bump on every check.
"""

from __future__ import annotations

from typing import Any, Callable

from tada.errors import AssertionFailure, EmptyChainError, MissingBodyError


class Step:
    """A named unit of work invoked with a mutable context."""

    def __init__(self, body: Callable[..., Any] | None = None, **options: Any) -> None:
        self.options: dict[str, Any] = options
        self.body = body
        self.assertions: int = 0

    def __repr__(self) -> str:
        return f"<{type(self).__name__} options={self.options!r}>"

    def __call__(self, context: Any) -> Any:
        return self.call(context)

    def call(self, context: Any) -> Any:
        """Run the body against ``context`` and return its result.

        Raises:
            MissingBodyError: If the step was built without a body.
        """
        if self.body is None:
            raise MissingBodyError(f"body required for step {self!r}")
        return self.body(context)

    # Assertion helpers

    def assert_that(self, condition: Any, message: str | None = None) -> None:
        self.assertions += 1
        if not condition:
            raise AssertionFailure(message or "Expected condition to be truthy")

    def assert_equal(self, expected: Any, actual: Any, message: str | None = None) -> None:
        self.assertions += 1
        if expected != actual:
            detail = f"Expected: {expected!r}\n  Actual: {actual!r}"
            raise AssertionFailure(f"{message}\n{detail}" if message else detail)

    def assert_raises(
        self,
        exc_type: type[BaseException],
        fn: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> BaseException:
        """Check that ``fn(*args, **kwargs)`` raises ``exc_type``.

        Returns:
            The caught exception, for further inspection.
        """
        self.assertions += 1
        try:
            fn(*args, **kwargs)
        except exc_type as e:
            return e
        raise AssertionFailure(f"{exc_type.__name__} expected but nothing was raised")


class ChainedStep(Step):
    """Runs a fixed, ordered list of child steps against one context."""

    @property
    def children(self) -> list[Step]:
        return self.options["children"]

    def call(self, context: Any) -> None:
        for child in self.children:
            child.call(context)


def chain(*steps: Step) -> Step:
    """Combine steps into one that runs them in order.

    Nested chains are spliced in rather than nested, and a single step is
    returned as-is.

    Raises:
        EmptyChainError: If no steps are given.
    """
    flat: list[Step] = []
    for s in steps:
        if isinstance(s, ChainedStep):
            flat.extend(s.children)
        else:
            flat.append(s)

    if not flat:
        raise EmptyChainError("at least one step required")
    if len(flat) == 1:
        return flat[0]
    return ChainedStep(children=flat)


def step(**options: Any) -> Callable[[Callable[..., Any]], Step]:
    """Decorator form of ``Step(fn, **options)``."""

    def decorate(fn: Callable[..., Any]) -> Step:
        return Step(fn, **options)

    return decorate
