#!/usr/bin/env python3
"""Test runner for Postpress with coverage reporting."""

import sys
import subprocess
import os
from pathlib import Path


def install_requirements():
    """Install the package and its test requirements."""
    print("📦 Installing test requirements...")
    try:
        subprocess.run([
            sys.executable, "-m", "pip", "install", "-e", ".[test]"
        ], check=True, capture_output=True)
        print("✅ Test requirements installed successfully")
        return True
    except subprocess.CalledProcessError as e:
        print(f"❌ Failed to install test requirements: {e}")
        return False


def run_tests():
    """Run all tests with coverage reporting."""
    print("\n🔍 Running tests with coverage...")
    result = subprocess.run([
        sys.executable, "-m", "pytest",
        "tests/",
        "-v",
        "--cov=postpress",
        "--cov-report=html",
        "--cov-report=term-missing",
        "--cov-fail-under=80"
    ], check=False)

    if result.returncode == 0:
        print("\n✅ All tests passed!")
        print("📊 Coverage report generated in htmlcov/")
        return True
    print(f"\n❌ Tests failed with return code {result.returncode}")
    return False


def run_pipeline_tests():
    """Run the ordering, pagination and tag invariant tests on their own."""
    print("\n🧮 Running pipeline invariant tests...")
    result = subprocess.run([
        sys.executable, "-m", "pytest",
        "tests/test_collection.py",
        "tests/test_pagination.py",
        "tests/test_tags.py",
        "-v",
        "--durations=10"
    ], check=False)

    if result.returncode == 0:
        print("✅ Pipeline tests passed!")
        return True
    print("❌ Pipeline tests failed!")
    return False


def main():
    """Main test runner."""
    os.chdir(Path(__file__).parent)

    print("🧪 Running Postpress Test Suite")
    print("=" * 50)

    if not install_requirements():
        return 1

    success = run_tests() and run_pipeline_tests()

    print("\n" + "=" * 50)
    if success:
        print("🎉 All test suites completed successfully!")
    else:
        print("💥 Some tests failed. Please review the output above.")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
