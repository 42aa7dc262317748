"""Console formatter: progress lines and fail-fast diagnostics.

Prints one ``[n/total]`` line per test and suite, indented by suite depth.
The first error ends the run: a diagnostic block (name, location, error
type, message, backtrace without framework frames) goes to the output
stream and the process exits with status 1.
"""

from __future__ import annotations

import os
import sys
import time
import traceback
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Mapping

from tada.execution.runner import count_plan
from tada.reporting.formatter import Body, Formatter
from tada.reporting.reporter import Reporter, StepResult
from tada.suite import LOCATION

if TYPE_CHECKING:
    from tada.execution.runner import PlanNode
    from tada.suite import Suite, Test

BOLD = "\033[1m"
RED = "\033[31m"
RESET = "\033[0m"

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def resolve_color(
    output: IO[str],
    color: bool | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Decide whether to emit ANSI colors.

    An explicit ``color`` wins. Otherwise ``NO_COLOR`` disables and
    ``COLOR`` forces color; with neither set, color is used only when
    ``output`` is a terminal.
    """
    if color is not None:
        return color
    env = os.environ if environ is None else environ
    if env.get("NO_COLOR"):
        return False
    if env.get("COLOR"):
        return True
    isatty = getattr(output, "isatty", None)
    return bool(isatty and isatty())


class ConsoleFormatter(Formatter):
    """Reference formatter writing progress and failures to a stream."""

    def __init__(
        self,
        output: IO[str] | None = None,
        color: bool | None = None,
        environ: Mapping[str, str] | None = None,
        cwd: str | None = None,
        reporter: Reporter | None = None,
        report_path: Path | None = None,
        ignore_paths: list[str] | None = None,
    ) -> None:
        self.output = output if output is not None else sys.stderr
        self.color = resolve_color(self.output, color, environ)
        self.cwd = cwd if cwd is not None else os.getcwd()
        self.reporter = reporter
        self.report_path = report_path
        self.ignore_paths = ignore_paths if ignore_paths is not None else [PACKAGE_DIR]

        self.indent = 0
        self.total = 0
        self.completed = 0
        self._col_size = 1

    def _print(self, line: str = "") -> None:
        print(line, file=self.output)

    def format(self, text: str, bold: bool = False, red: bool = False) -> str:
        if not self.color:
            return text
        prefix = (BOLD if bold else "") + (RED if red else "")
        return f"{prefix}{text}{RESET}"

    def prepare_execution(self, plan: list[PlanNode]) -> None:
        self.total += count_plan(plan)
        self._col_size = len(str(self.total))
        if self.reporter is not None:
            self.reporter.set_planned(self.total)

    def finish_execution(self) -> None:
        self._print(f"{self.completed}/{self.total} completed")
        self._write_report()

    def name_for(self, labels: dict[str, Any], fallback: str) -> str:
        """Display name: the ``name`` label, else ``rel/path:line``."""
        name = labels.get("name")
        if name is not None:
            return str(name)
        loc = labels.get(LOCATION)
        if loc is not None:
            return loc.relative_to(self.cwd)
        return fallback

    @property
    def progress(self) -> str:
        return f"[{str(self.completed + 1).rjust(self._col_size)}/{self.total}]"

    @property
    def indent_space(self) -> str:
        return "  " * self.indent

    def should_ignore_path(self, path: str) -> bool:
        path = os.path.abspath(path)
        for ignore in self.ignore_paths:
            if path == ignore or path.startswith(ignore.rstrip(os.sep) + os.sep):
                return True
        return False

    def run_test(self, test: Test, body: Body) -> Any:
        name = self.name_for(test.labels, "test")
        self._print(f"{self.progress} {self.indent_space} {name}")
        self.completed += 1
        start = time.monotonic()
        try:
            result = body()
        except Exception as e:
            self._record(name, "test", test.labels, start, e)
            return self.error_handler(e, name, test.labels.get(LOCATION))
        self._record(name, "test", test.labels, start)
        return result

    def run_suite(self, suite: Suite, body: Body) -> Any:
        name = self.name_for(suite.labels, "suite")
        self._print(f"{self.progress} {self.indent_space} {name}")
        self.indent += 1
        self.completed += 1
        start = time.monotonic()
        try:
            result = body()
        except Exception as e:
            self._record(name, "suite", suite.labels, start, e)
            return self.error_handler(e, name, suite.labels.get(LOCATION))
        else:
            self._record(name, "suite", suite.labels, start)
            return result
        finally:
            self.indent -= 1

    def error_handler(self, err: BaseException, name: str, loc: Any) -> Any:
        """Print a diagnostic for ``err`` and exit with status 1.

        Subclasses that return instead let the run continue; the value
        returned stands in for the failed body's result.
        """
        self._print(self.format("Error occurred", bold=True, red=True))
        self._print(f"  {self.format('Name:', bold=True)} {name}")
        self._print(f"  {self.format('File:', bold=True)} {loc if loc is not None else '<unknown>'}")
        self._print(f"  {self.format('Error:', bold=True)} {type(err).__name__}")
        self._print(str(err))
        self._print(f"  {self.format('Backtrace:', bold=True)}")
        for frame in traceback.extract_tb(err.__traceback__):
            if self.should_ignore_path(frame.filename):
                continue
            self._print(f"{frame.filename}:{frame.lineno}:in {frame.name}")
        self.output.flush()
        self._write_report()
        sys.exit(1)

    def _record(
        self,
        name: str,
        kind: str,
        labels: dict[str, Any],
        start: float,
        err: BaseException | None = None,
    ) -> None:
        if self.reporter is None:
            return
        loc = labels.get(LOCATION)
        self.reporter.add_result(StepResult(
            name=name,
            kind=kind,
            status="failed" if err is not None else "passed",
            location=str(loc) if loc is not None else None,
            duration=time.monotonic() - start,
            error=f"{type(err).__name__}: {err}" if err is not None else None,
        ))

    def _write_report(self) -> None:
        if self.reporter is None or self.report_path is None:
            return
        self.reporter.write_yaml(self.report_path)
        self._print(f"Report written to {self.report_path}")
