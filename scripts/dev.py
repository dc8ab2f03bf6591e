#!/usr/bin/env python3
"""
UV-based development script for the envelope tracking package.

Wraps the test, lint, format and demo commands so every task runs in the
same uv-managed environment.
"""

import shutil
import subprocess
import sys

PACKAGE = "envelope_tracking"
SOURCE_DIRS = [PACKAGE, "tests", "examples"]

DEMOS = {
    "quick": "examples/quick_start_demo.py",
    "detrough": "examples/detrough_demo.py",
    "errors": "examples/error_handling_demo.py",
}


def run_uv_command(args, description="", check=True):
    """Run a UV command and report failures."""
    cmd = ["uv"] + args
    print(f"Running: {' '.join(cmd)}")
    if description:
        print(f"  {description}")

    try:
        result = subprocess.run(cmd, check=check, text=True)
        return result.returncode == 0
    except subprocess.CalledProcessError as e:
        print(f"  Error: Command failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print("  Error: UV not found. See https://docs.astral.sh/uv/getting-started/installation/")
        return False


def check_uv():
    """Check if UV is available."""
    if not shutil.which("uv"):
        print("UV not found. Install it with: pip install uv")
        return False
    result = subprocess.run(["uv", "--version"], capture_output=True, text=True)
    if result.returncode != 0:
        print("✗ UV installation appears to be broken")
        return False
    print(f"✓ {result.stdout.strip()}")
    return True


def setup():
    """Set up the development environment."""
    print("=== Setting up envelope tracking with UV ===")

    if not check_uv():
        return False
    if not run_uv_command(["sync", "--extra", "dev"], "Syncing dependencies"):
        return False
    return run_uv_command(
        ["run", "python", "-c", f"import {PACKAGE}; print('✓ Package import successful')"],
        "Verifying package installation",
    )


def test(coverage=False, specific_test=None):
    """Run tests."""
    print("=== Running Tests with UV ===")

    if specific_test:
        return run_uv_command(["run", "pytest", specific_test, "-v"], f"Running {specific_test}")
    if coverage:
        args = ["run", "pytest", f"--cov={PACKAGE}", "--cov-report=term", "-v"]
        return run_uv_command(args, "Running tests with coverage")
    return run_uv_command(["run", "pytest", "-v"], "Running all tests")


def lint():
    """Run code quality checks."""
    print("=== Running Code Quality Checks with UV ===")

    checks = [
        (["run", "flake8"] + SOURCE_DIRS, "Running flake8"),
        (["run", "black", "--check"] + SOURCE_DIRS, "Checking code formatting"),
        (["run", "isort", "--check-only"] + SOURCE_DIRS, "Checking import sorting"),
        (["run", "mypy", PACKAGE], "Running type checking"),
    ]

    all_passed = True
    for args, desc in checks:
        if not run_uv_command(args, desc, check=False):
            all_passed = False
    return all_passed


def format_code():
    """Format code with black and isort."""
    print("=== Formatting Code with UV ===")

    for args, desc in [
        (["run", "black"] + SOURCE_DIRS, "Formatting with black"),
        (["run", "isort"] + SOURCE_DIRS, "Sorting imports with isort"),
    ]:
        if not run_uv_command(args, desc):
            return False
    return True


def demo(demo_name="all"):
    """Run one demo, or all of them."""
    print(f"=== Running Demo: {demo_name} ===")

    if demo_name == "all":
        return all(
            run_uv_command(["run", "python", path], f"Running {name} demo")
            for name, path in DEMOS.items()
        )
    if demo_name not in DEMOS:
        print(f"Unknown demo: {demo_name}")
        print(f"Available demos: {', '.join(DEMOS)}, all")
        return False
    return run_uv_command(["run", "python", DEMOS[demo_name]], f"Running {demo_name} demo")


def main():
    """Main entry point."""
    if len(sys.argv) < 2:
        print("UV Development Script for envelope tracking")
        print("=" * 50)
        print("Usage: python scripts/dev.py <command> [args]")
        print("\nCommands:")
        print("  setup                    - Set up development environment")
        print("  test [--cov] [test_path] - Run tests")
        print("  lint                     - Run code quality checks")
        print("  format                   - Format code")
        print(f"  demo [name]              - Run demos ({'|'.join(DEMOS)}|all)")
        return

    command = sys.argv[1]

    if command == "setup":
        success = setup()
    elif command == "test":
        specific_test = next((a for a in sys.argv[2:] if not a.startswith("--")), None)
        success = test(coverage="--cov" in sys.argv, specific_test=specific_test)
    elif command == "lint":
        success = lint()
    elif command == "format":
        success = format_code()
    elif command == "demo":
        success = demo(sys.argv[2] if len(sys.argv) > 2 else "all")
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)

    if not success:
        print(f"\n✗ Command '{command}' failed")
        sys.exit(1)
    print(f"\n✓ Command '{command}' completed successfully")


if __name__ == "__main__":
    main()
