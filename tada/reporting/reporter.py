"""YAML run reports.

Collects one ``StepResult`` per test and suite the console formatter runs
and writes them, with summary counts, as a YAML document.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

# Valid status values
VALID_STATUSES = frozenset({"passed", "failed"})


@dataclass
class StepResult:
    """Outcome of one test or suite."""

    name: str
    kind: str  # test, suite
    status: str  # passed, failed
    location: str | None = None
    duration: float = 0.0
    error: str | None = None


class Reporter:
    """Collects step results and generates YAML reports."""

    def __init__(self, seed: int | None = None) -> None:
        self.results: list[StepResult] = []
        self.seed = seed
        self.planned: int | None = None

    def set_planned(self, total: int) -> None:
        """Record how many plan nodes were scheduled."""
        self.planned = total

    def add_result(self, result: StepResult) -> None:
        if result.status not in VALID_STATUSES:
            raise ValueError(f"Invalid status: {result.status}")
        self.results.append(result)

    def generate_report(self) -> dict[str, Any]:
        """Generate the report data structure.

        Returns:
            Dictionary suitable for YAML serialization.
        """
        now = datetime.datetime.now(tz=datetime.timezone.utc).isoformat()
        report: dict[str, Any] = {
            "generated_at": now,
            "summary": self._compute_summary(),
        }
        if self.seed is not None:
            report["seed"] = self.seed
        report["results"] = [self._format_result(r) for r in self.results]
        return {"report": report}

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file.

        Args:
            path: File path to write the YAML report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(
                report,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def _compute_summary(self) -> dict[str, Any]:
        tests = [r for r in self.results if r.kind == "test"]
        summary: dict[str, Any] = {
            "tests": len(tests),
            "suites": len(self.results) - len(tests),
            "passed": sum(1 for r in self.results if r.status == "passed"),
            "failed": sum(1 for r in self.results if r.status == "failed"),
            "total_duration_seconds": round(
                sum(r.duration for r in tests), 3
            ),
        }
        if self.planned is not None:
            summary["planned"] = self.planned
        return summary

    def _format_result(self, result: StepResult) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "name": result.name,
            "kind": result.kind,
            "status": result.status,
            "duration_seconds": round(result.duration, 3),
        }
        if result.location:
            entry["location"] = result.location
        if result.error:
            entry["error"] = result.error
        return entry
