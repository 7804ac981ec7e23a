#!/usr/bin/env python3
# Copyright 2026 Kryo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the kryo CI checks locally.

By default every step runs; ``--only`` and ``--skip`` select steps by name and
``--fail-fast`` stops at the first failure::

    python tools/ci.py --only lint tests
"""

import argparse
import pathlib
import subprocess
import sys
import time
from dataclasses import dataclass

from yachalk import chalk

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Step:
    name: str
    title: str
    command: list[str]


STEPS: list[Step] = [
    Step("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    Step("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    Step("types", "Type check", ["uv", "run", "ty", "check", "src/"]),
    Step("tests", "Tests", ["uv", "run", "pytest", "--cov=kryo", "--cov-report=term-missing"]),
    Step("build", "Build", ["uv", "build"]),
]


def main(argv: list[str] | None = None) -> int:
    """Run the selected CI steps and print a summary.

    Returns:
        ``0`` if every step that ran passed, ``1`` otherwise.
    """
    args = _build_parser().parse_args(argv)
    steps = [step for step in STEPS if _selected(step, args.only, args.skip)]

    results: list[tuple[Step, bool, float]] = []
    for step in steps:
        passed, elapsed = _run(step)
        results.append((step, passed, elapsed))
        if not passed and args.fail_fast:
            break

    _print_banner("Summary")
    for step, passed, elapsed in results:
        paint = chalk.green if passed else chalk.red
        print(paint(f"  {'PASS' if passed else 'FAIL'}  {step.title} ({elapsed:.1f}s)"))
    for step in steps[len(results) :]:
        print(chalk.yellow(f"  SKIP  {step.title}"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_REPO_ROOT = pathlib.Path(__file__).parent.parent


def _build_parser() -> argparse.ArgumentParser:
    names = [step.name for step in STEPS]
    parser = argparse.ArgumentParser(description="Run the kryo CI checks.")
    parser.add_argument("--only", nargs="+", choices=names, help="run only these steps")
    parser.add_argument("--skip", nargs="+", choices=names, default=[], help="do not run these steps")
    parser.add_argument("--fail-fast", action="store_true", help="stop after the first failing step")
    return parser


def _selected(step: Step, only: list[str] | None, skip: list[str]) -> bool:
    if only is not None and step.name not in only:
        return False
    return step.name not in skip


def _print_banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


def _run(step: Step) -> tuple[bool, float]:
    _print_banner(step.title)
    start = time.monotonic()
    proc = subprocess.run(step.command, cwd=_REPO_ROOT, check=False)
    return proc.returncode == 0, time.monotonic() - start


if __name__ == "__main__":
    sys.exit(main())
