#!/usr/bin/env python3
"""Run every formatter and linter configured in pyproject.toml.

Runs, in order: black, isort, ruff, pylint and finally the pytest suite, then
prints one summary with the output of each failing step.
"""

from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent

CHECKS: list[tuple[list[str], str]] = [
    ([sys.executable, "-m", "black", ".", "--check"], "black format check"),
    ([sys.executable, "-m", "isort", ".", "--check-only"], "isort import order"),
    ([sys.executable, "-m", "ruff", "check", "."], "ruff"),
    (
        [sys.executable, "-m", "pylint", "app", "core", "infrastructure", "main.py"],
        "pylint",
    ),
    ([sys.executable, "-m", "pytest", "-q"], "pytest"),
]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` from the repo root; return (success, combined output)."""
    print(f"\n{'=' * 60}")
    print(f"{description}: {' '.join(cmd)}")
    print("=" * 60)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    output = result.stdout + result.stderr
    success = result.returncode == 0
    print("OK" if success else "FAILED")
    if output.strip():
        print(output)
    return success, output


def main() -> None:
    results = [(desc, *run_command(cmd, desc)) for cmd, desc in CHECKS]

    print(f"\n{'=' * 60}")
    print("Summary")
    print("=" * 60)
    for description, success, _ in results:
        print(f"{description}: {'passed' if success else 'FAILED'}")

    failed = [(d, out) for d, ok, out in results if not ok]
    for description, output in failed:
        if output.strip():
            print(f"\n--- {description} ---")
            print(output)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
