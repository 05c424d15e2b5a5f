#!/usr/bin/env python3
"""
Generate test coverage report for the Park-It Parking System.
Requires: pip install -e ".[test]"
"""

import sys
from pathlib import Path

import coverage


def generate_coverage_report():
    """Generate test coverage report"""
    cov = coverage.Coverage(
        source=['parkit'],
        omit=['*/tests/*', '*/__pycache__/*']
    )
    cov.start()

    try:
        sys.path.insert(0, str(Path(__file__).parent))
        from run_tests import run_all_tests
        result = run_all_tests()
    finally:
        cov.stop()
        cov.save()

    print("\n" + "=" * 60)
    print("Test Coverage Report")
    print("=" * 60)

    print("\nConsole Report:")
    cov.report(show_missing=True)

    print("\nGenerating HTML report...")
    cov.html_report(directory='htmlcov')
    print("HTML report generated in 'htmlcov' directory")

    print("\nGenerating XML report...")
    cov.xml_report(outfile='coverage.xml')
    print("XML report generated as 'coverage.xml'")

    return result


if __name__ == "__main__":
    result = generate_coverage_report()
    sys.exit(0 if result.wasSuccessful() else 1)
