"""Discovery - framework detection, test file enumeration and case classification."""

from .classifier import (
    extract_tags,
    extract_test_cases,
    infer_test_type,
    is_test_file,
)
from .discoverer import (
    analyze_test_file,
    build_test_files,
    discover_tests,
    find_test_paths,
    matches_path_filters,
)
from .framework import detect_framework
from .models import TestCase, TestFile, TestFramework, TestStatus, TestType

__all__ = [
    "detect_framework",
    "discover_tests",
    "analyze_test_file",
    "build_test_files",
    "find_test_paths",
    "matches_path_filters",
    "extract_test_cases",
    "extract_tags",
    "infer_test_type",
    "is_test_file",
    "TestCase",
    "TestFile",
    "TestFramework",
    "TestStatus",
    "TestType",
]
