#!/usr/bin/env python3
"""
Test Runner for the RKSD College assistant.

USAGE:
    python tests/run_tests.py [options]

    Options:
    --unit           Run speech, chat and TTS dispatcher tests
    --storage        Run in-memory and relational storage tests
    --api            Run endpoint tests
    --all            Run all available tests (default)
    --coverage       Run tests with coverage reporting
    --verbose        Run with verbose output
"""

import sys
import subprocess
import argparse
from pathlib import Path

project_root = Path(__file__).parent.parent

SUITES = {
    "unit": ["tests/test_preprocess.py", "tests/test_chat.py", "tests/test_tts.py", "tests/test_logger.py"],
    "storage": ["tests/test_storage.py"],
    "api": ["tests/test_api.py"],
    "all": ["tests/"],
}

def run_command(command, description):
    """Run a command and report whether it passed."""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(command)}")
    print(f"{'='*60}")

    result = subprocess.run(command, cwd=project_root)
    if result.returncode == 0:
        print(f"\n✅ {description} completed successfully!")
        return True
    print(f"\n❌ {description} failed with exit code {result.returncode}")
    return False

def run_suite(name, verbose=False, coverage=False):
    command = [sys.executable, "-m", "pytest", *SUITES[name]]
    if verbose:
        command.append("-v")
    if coverage:
        command.extend(["--cov=rksd_assistant", "--cov-report=term-missing"])
    return run_command(command, f"{name} tests")

def main():
    parser = argparse.ArgumentParser(description="Test Runner for the RKSD College assistant")
    for name in SUITES:
        parser.add_argument(f"--{name}", action="store_true", help=f"Run {name} tests")
    parser.add_argument("--coverage", action="store_true", help="Run tests with coverage reporting")
    parser.add_argument("--verbose", action="store_true", help="Run with verbose output")
    args = parser.parse_args()

    selected = [name for name in SUITES if getattr(args, name)] or ["all"]

    results = [run_suite(name, verbose=args.verbose, coverage=args.coverage) for name in selected]
    passed = sum(results)

    print(f"\n{'='*60}")
    print("TEST RUN SUMMARY")
    print(f"{'='*60}")
    print(f"Suites run: {len(results)}")
    print(f"Successful: {passed}")
    print(f"Failed: {len(results) - passed}")

    sys.exit(0 if passed == len(results) else 1)

if __name__ == "__main__":
    main()
