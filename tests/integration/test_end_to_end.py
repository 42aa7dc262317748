"""End-to-end tests running suites in a separate interpreter.

Each test writes a small script that builds a suite and runs it with the
console formatter, then checks the exit status and output.
"""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import textwrap
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def _run_script(tmpdir: Path, source: str, **env: str) -> subprocess.CompletedProcess:
    """Write ``source`` to a script in ``tmpdir`` and run it."""
    script = tmpdir / "suite_script.py"
    script.write_text(textwrap.dedent(source))
    full_env = {
        k: v for k, v in os.environ.items()
        if k not in ("NO_COLOR", "COLOR", "TADA_SEED")
    }
    full_env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(REPO_ROOT), full_env.get("PYTHONPATH")])
    )
    full_env.update(env)
    return subprocess.run(
        [sys.executable, str(script)],
        capture_output=True,
        text=True,
        cwd=tmpdir,
        env=full_env,
        timeout=60,
    )


PASSING = """
from tada import ConsoleFormatter, Runner, Step, Suite

suite = Suite()
with suite.with_before(Step(lambda ctx: ctx.set("db", [])), name="db") as db:
    db.test("insert", Step(lambda ctx: ctx.get("db").append(1)))
    db.test("count", Step(lambda ctx: print("seen", len(ctx.get("db")))))
suite.test("plain", Step(lambda ctx: None))

Runner(suite, ConsoleFormatter()).run()
print("done")
"""

# The test is declared on line 9 of the generated script.
FAILING = """
from tada import ConsoleFormatter, Runner, Step, Suite

def check(ctx):
    step.assert_equal(2, 1 + 2, "arithmetic is off")

step = Step(check)
suite = Suite()
suite.test("math", step)

Runner(suite, ConsoleFormatter()).run()
print("unreachable")
"""

SHUFFLED = """
from tada import ConsoleFormatter, Location, Runner, Step, Suite

suite = Suite()
for i in range(10):
    suite.test(f"t{i}", Step(lambda ctx: None),
               __location=Location(f"/virtual/f{i}.py", 1))
Runner(suite, ConsoleFormatter(), seed=1234).run()
"""


class TestEndToEnd:
    """Full runs through a fresh interpreter."""

    def test_passing_run_exits_zero(self):
        """A run with no failures returns normally."""
        with tempfile.TemporaryDirectory() as tmpdir:
            proc = _run_script(Path(tmpdir), PASSING)
            assert proc.returncode == 0, proc.stderr
            assert proc.stdout.splitlines()[-1] == "done"
            assert "[1/4]" in proc.stderr
            assert "4/4 completed" in proc.stderr

    def test_failing_run_exits_one(self):
        """A failing assertion reports and exits with status 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            proc = _run_script(Path(tmpdir), FAILING)
            assert proc.returncode == 1
            assert "unreachable" not in proc.stdout
            err = proc.stderr
            assert "Error occurred" in err
            assert "Name: math" in err
            assert "suite_script.py:9" in err
            assert "Error: AssertionFailure" in err
            assert "arithmetic is off" in err

            backtrace = err.split("Backtrace:")[1]
            assert "suite_script.py" in backtrace
            assert str(REPO_ROOT / "tada") not in backtrace

    def test_color_forced_by_environment(self):
        """COLOR turns on ANSI output for a non-terminal stream."""
        with tempfile.TemporaryDirectory() as tmpdir:
            proc = _run_script(Path(tmpdir), FAILING, COLOR="1")
            assert "\033[1m\033[31mError occurred\033[0m" in proc.stderr

    def test_no_color_wins_over_color(self):
        """NO_COLOR disables ANSI output even when COLOR is set."""
        with tempfile.TemporaryDirectory() as tmpdir:
            proc = _run_script(Path(tmpdir), FAILING, COLOR="1", NO_COLOR="1")
            assert "\033[" not in proc.stderr

    def test_order_reproducible_across_processes(self):
        """A fixed seed yields the same order in separate interpreters."""
        with tempfile.TemporaryDirectory() as tmpdir:
            first = _run_script(Path(tmpdir), SHUFFLED)
            second = _run_script(Path(tmpdir), SHUFFLED)
            assert first.returncode == second.returncode == 0
            assert first.stderr == second.stderr
