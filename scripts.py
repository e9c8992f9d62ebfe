#!/usr/bin/env python3
"""
Development scripts for the izumi-binder project.

Each command maps to one or more tool invocations run through uv:

    python scripts.py test       # pytest
    python scripts.py lint       # ruff check + ruff format --check
    python scripts.py typecheck  # mypy + pyright on the package
    python scripts.py demos      # every script in demo/
    python scripts.py readme     # code blocks in README.md via phmdoctest
    python scripts.py check      # all of the above
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

PACKAGE_DIR = "src/izumi/binder/"


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if successful."""
    print(f"\n🔄 {description}...")
    print(f"Running: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True, capture_output=False)
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"❌ Command not found: {cmd[0]}")
        return False
    print(f"✅ {description} passed")
    return True


def run_all(commands: list[tuple[list[str], str]]) -> int:
    """Run every command, even after a failure, and report the combined status."""
    results = [run_command(cmd, desc) for cmd, desc in commands]
    return 0 if all(results) else 1


def run_tests() -> int:
    print("🧪 Running test suite")
    return run_all([(["uv", "run", "pytest", "-v"], "Tests")])


def run_lint() -> int:
    print("🔍 Running linting checks")
    status = run_all(
        [
            (["uv", "run", "ruff", "check", "."], "Ruff linting"),
            (["uv", "run", "ruff", "format", "--check", "."], "Ruff formatting"),
        ]
    )
    if status:
        print("\n💡 To auto-fix, run: uv run ruff format . && uv run ruff check --fix .")
    return status


def run_typecheck() -> int:
    print("🔬 Running type checking")
    return run_all(
        [
            (["uv", "run", "mypy", PACKAGE_DIR], "MyPy type checking"),
            (["uv", "run", "pyright", PACKAGE_DIR], "Pyright type checking"),
        ]
    )


def run_demos() -> int:
    """Run every demo script; files starting with an underscore are helpers."""
    print("🎭 Running demo scripts")

    demo_files = sorted(p for p in Path("demo").glob("*.py") if not p.name.startswith("_"))
    if not demo_files:
        print("⚠️  No demo files found in demo directory")
        return 0

    return run_all([(["uv", "run", "python", str(p)], f"Demo: {p.name}") for p in demo_files])


def run_readme_validation() -> int:
    """Turn README.md code blocks into a temporary test module and run it."""
    print("📖 Validating README code examples")

    readme_path = Path("README.md")
    if not readme_path.exists():
        print("❌ README.md not found")
        return 1

    test_file_path = Path("test_readme.py")
    test_file_path.unlink(missing_ok=True)
    try:
        if not run_command(
            ["uv", "run", "phmdoctest", str(readme_path), "--outfile", str(test_file_path)],
            "Generating README tests",
        ):
            return 1
        return run_all([(["uv", "run", "pytest", str(test_file_path), "-v"], "README code examples")])
    finally:
        test_file_path.unlink(missing_ok=True)


COMMANDS: dict[str, Callable[[], int]] = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
    "readme": run_readme_validation,
}


def check_all() -> int:
    """Run every command and print a summary table."""
    print("🚀 Running all checks for izumi-binder")
    print("=" * 50)

    results: dict[str, bool] = {}
    for name, func in COMMANDS.items():
        print(f"\n{'=' * 20} {name} {'=' * 20}")
        results[name] = func() == 0

    print(f"\n{'=' * 20} SUMMARY {'=' * 20}")
    for name, passed in results.items():
        print(f"{name:<15} {'✅ PASS' if passed else '❌ FAIL'}")

    if all(results.values()):
        print("\n🎉 All checks passed!")
        return 0
    print("\n💥 Some checks failed. Please fix the issues above.")
    return 1


if __name__ == "__main__":
    available = ", ".join([*COMMANDS, "check"])
    if len(sys.argv) < 2:
        print(f"Available commands: {available}")
        print("Usage: python scripts.py <command>")
        sys.exit(0)

    command = sys.argv[1]
    if command == "check":
        sys.exit(check_all())
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {available}")
        sys.exit(1)
    sys.exit(COMMANDS[command]())
