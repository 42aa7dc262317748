"""Reporting: the formatter interface, console output and YAML reports."""

from tada.reporting.console import ConsoleFormatter, resolve_color
from tada.reporting.formatter import Formatter
from tada.reporting.reporter import Reporter, StepResult

__all__ = [
    "ConsoleFormatter",
    "Formatter",
    "Reporter",
    "StepResult",
    "resolve_color",
]
