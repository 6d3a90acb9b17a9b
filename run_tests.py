#!/usr/bin/env python3
"""
Test runner script for the CN Admin Tree project.

This script provides options for running tests:
- All tests
- Core tests (classification, hierarchy building, annotation)
- Pipeline tests (loader, engine, output, command line)
- Coverage reporting
"""

import sys
import subprocess
import argparse


CORE_TESTS = [
    "tests/test_hierarchy_config.py",
    "tests/test_hierarchy_builder.py",
    "tests/test_tree_annotator.py",
]

PIPELINE_TESTS = [
    "tests/test_data_loader.py",
    "tests/test_area_engine.py",
    "tests/test_output_generator.py",
    "tests/test_area_matcher.py",
    "tests/test_main.py",
]


def run_command(cmd, description=""):
    """Run a command and return the result."""
    print(f"\n{'='*60}")
    if description:
        print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'='*60}")

    result = subprocess.run(cmd, check=False)
    print(f"\nExit code: {result.returncode}")
    return result.returncode == 0


def run_all_tests():
    cmd = [sys.executable, "-m", "pytest", "tests", "-v", "--tb=short"]
    return run_command(cmd, "All Tests")


def run_core_tests():
    cmd = [sys.executable, "-m", "pytest", *CORE_TESTS, "-v", "--tb=short"]
    return run_command(cmd, "Core Tests")


def run_pipeline_tests():
    cmd = [sys.executable, "-m", "pytest", *PIPELINE_TESTS, "-v", "--tb=short"]
    return run_command(cmd, "Pipeline Tests")


def run_coverage_tests():
    """Run tests with coverage reporting (requires pytest-cov)."""
    cmd = [sys.executable, "-m", "pytest", "tests", "--cov=cn_admin_tree",
           "--cov-report=term-missing", "-v"]
    return run_command(cmd, "Coverage Tests")


def run_specific_test(test_file):
    """Run a specific test file."""
    cmd = [sys.executable, "-m", "pytest", test_file, "-v"]
    return run_command(cmd, f"Specific Test: {test_file}")


def check_test_environment():
    """Check if the test environment is properly set up."""
    print("Checking test environment...")
    print(f"Python version: {sys.version}")

    required_packages = ['pandas', 'rapidfuzz', 'tqdm', 'pytest']
    missing_packages = []

    for package in required_packages:
        try:
            __import__(package)
            print(f"[ok] {package} is available")
        except ImportError:
            print(f"[missing] {package}")
            missing_packages.append(package)

    try:
        import cn_admin_tree
        print(f"[ok] cn_admin_tree {cn_admin_tree.__version__} is importable")
    except ImportError as e:
        print(f"[missing] cn_admin_tree package import failed: {e}")
        missing_packages.append('cn_admin_tree')

    if missing_packages:
        print(f"\nMissing required packages: {', '.join(missing_packages)}")
        print("Please install them using: pip install -r requirements.txt")
        return False

    print("\nTest environment is ready")
    return True


def main():
    """Main test runner function."""
    parser = argparse.ArgumentParser(description="CN Admin Tree Test Runner")
    parser.add_argument("--type", choices=["all", "core", "pipeline", "coverage"],
                        default="all", help="Type of tests to run")
    parser.add_argument("--file", help="Run specific test file")
    parser.add_argument("--check-env", action="store_true", help="Check test environment")

    args = parser.parse_args()

    if args.check_env:
        return 0 if check_test_environment() else 1

    if not check_test_environment():
        print("\nTest environment check failed. Please fix the issues above.")
        return 1

    if args.file:
        success = run_specific_test(args.file)
    elif args.type == "core":
        success = run_core_tests()
    elif args.type == "pipeline":
        success = run_pipeline_tests()
    elif args.type == "coverage":
        success = run_coverage_tests()
    else:
        success = run_all_tests()

    if success:
        print("\nAll tests completed successfully")
        return 0
    else:
        print("\nSome tests failed. Please check the output above.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
