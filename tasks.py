"""Developer tasks powered by Invoke."""

from __future__ import annotations

import pathlib
import subprocess
from typing import Iterable

from invoke import task

ROOT = pathlib.Path(__file__).parent.resolve()
RESULTS_DIR = ROOT / "results"


def _run(command: Iterable[str] | str) -> None:
    cmd = command if isinstance(command, str) else " ".join(command)
    subprocess.run(cmd, shell=True, check=True, cwd=ROOT)


@task
def tests(_context):
    """Run the unit tests."""
    _run(["python", "-m", "pytest", "tests/unit"])


@task
def coverage(_context):
    """Run the unit tests under coverage and write reports to results/."""
    RESULTS_DIR.mkdir(exist_ok=True)
    _run(["python", "-m", "coverage", "erase"])
    _run(["python", "-m", "coverage", "run", "-m", "pytest", "tests/unit",
          "--junitxml=results/pytest.xml"])
    _run(["python", "-m", "coverage", "combine"])
    _run(["python", "-m", "coverage", "report"])
    _run(["python", "-m", "coverage", "html", "-d", "results/htmlcov"])


@task
def lint(_context):
    """Check formatting and types."""
    _run(["python", "-m", "black", "--check", "src", "tests"])
    _run(["python", "-m", "mypy", "src/a11yfixer"])
