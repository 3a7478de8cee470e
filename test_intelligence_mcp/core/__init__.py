"""Core domain logic for test intelligence."""

from .coverage import CoverageGap, CoverageReport, FileCoverage, find_coverage_gaps, parse_coverage_report
from .discovery import TestCase, TestFile, detect_framework, discover_tests
from .engine import TestIntelligence
from .health import TestSuiteHealth, score_health
from .history import FlakyTest, QuarantineRegistry, RunHistoryStore, RunRecord, TestRunResult, detect_flaky_tests
from .impact import ImpactedTest, TestSelection, select_tests
from .repository import Repository

__all__ = [
    # Engine
    "TestIntelligence",
    "Repository",
    # Discovery
    "detect_framework",
    "discover_tests",
    "TestCase",
    "TestFile",
    # Impact
    "select_tests",
    "ImpactedTest",
    "TestSelection",
    # History
    "detect_flaky_tests",
    "FlakyTest",
    "QuarantineRegistry",
    "RunHistoryStore",
    "RunRecord",
    "TestRunResult",
    # Coverage
    "parse_coverage_report",
    "find_coverage_gaps",
    "CoverageGap",
    "CoverageReport",
    "FileCoverage",
    # Health
    "score_health",
    "TestSuiteHealth",
]
