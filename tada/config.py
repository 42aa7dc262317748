"""Run configuration.

Reads the optional ``.tada_config`` JSON file holding the shuffle seed,
file filter, color preference and report path, and layers environment
overrides on top.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Mapping

from tada.reporting.console import ConsoleFormatter, resolve_color
from tada.reporting.reporter import Reporter

if TYPE_CHECKING:
    from tada.execution.runner import Runner

CONFIG_FILENAME = ".tada_config"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "seed": 0,
    "file_filter": None,
    "color": None,
    "report": None,
}


class RunConfig:
    """Configuration for a single test run."""

    def __init__(
        self,
        path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.path = path
        self.environ = os.environ if environ is None else environ
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            data = json.loads(self.path.read_text())
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            print(f"Warning: ignoring unreadable config file {self.path}", file=sys.stderr)
            self._data = dict(DEFAULT_CONFIG)

    @property
    def base_dir(self) -> Path:
        """Directory relative paths in the config are resolved against.

        Symlinks are kept, matching how test locations are recorded.
        """
        if self.path is not None:
            return Path(os.path.abspath(self.path)).parent
        return Path.cwd()

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def seed(self) -> int:
        """Shuffle seed; ``TADA_SEED`` overrides the file."""
        env_seed = self.environ.get("TADA_SEED")
        if env_seed:
            try:
                return int(env_seed)
            except ValueError:
                raise ValueError(f"TADA_SEED must be an integer, got {env_seed!r}") from None
        return int(self._data.get("seed") or 0)

    @property
    def file_filter(self) -> set[str] | None:
        """Absolute paths of the files whose tests run (None = all)."""
        files = self._data.get("file_filter")
        if files is None:
            return None
        return {os.path.abspath(self.base_dir / f) for f in files}

    @property
    def color(self) -> bool | None:
        val = self._data.get("color")
        return bool(val) if val is not None else None

    @property
    def report(self) -> Path | None:
        val = self._data.get("report")
        return self.base_dir / val if val else None

    def use_color(self, output: IO[str]) -> bool:
        return resolve_color(output, self.color, self.environ)

    def apply(self, runner: Runner) -> Runner:
        """Copy seed and file filter onto ``runner``."""
        runner.seed = self.seed
        runner.file_filter = self.file_filter
        return runner

    def formatter(self, output: IO[str] | None = None) -> ConsoleFormatter:
        """Build a console formatter honoring color and report settings."""
        output = output if output is not None else sys.stderr
        report = self.report
        return ConsoleFormatter(
            output,
            color=self.use_color(output),
            reporter=Reporter(seed=self.seed) if report is not None else None,
            report_path=report,
        )
