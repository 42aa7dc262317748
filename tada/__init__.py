"""tada: a minimal test runner with seeded shuffling and around hooks."""

from tada.context import Context
from tada.errors import (
    AssertionFailure,
    EmptyChainError,
    MissingBodyError,
    MissingWrapError,
    TadaError,
)
from tada.execution.runner import AroundExecution, Runner
from tada.reporting.console import ConsoleFormatter
from tada.reporting.formatter import Formatter
from tada.step import ChainedStep, Step, chain, step
from tada.suite import AroundSuite, Location, Suite, Test

__version__ = "0.1.0"

__all__ = [
    "AroundExecution",
    "AroundSuite",
    "AssertionFailure",
    "ChainedStep",
    "ConsoleFormatter",
    "Context",
    "EmptyChainError",
    "Formatter",
    "Location",
    "MissingBodyError",
    "MissingWrapError",
    "Runner",
    "Step",
    "Suite",
    "TadaError",
    "Test",
    "chain",
    "step",
]
