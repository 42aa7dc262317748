"""Exception types raised by the framework itself.

Construction errors are raised synchronously where the faulty object is
built or invoked. Failures raised by test bodies are not wrapped; they
travel unchanged to the formatter.
"""

from __future__ import annotations


class TadaError(Exception):
    """Base class for framework errors."""


class MissingBodyError(TadaError):
    """A step was called without a body to run."""


class EmptyChainError(TadaError, ValueError):
    """chain() was called with no steps."""


class MissingWrapError(TadaError, TypeError):
    """An around hook was declared without a wrapping function."""


class AssertionFailure(AssertionError):
    """Raised by the assertion helpers on Step."""
