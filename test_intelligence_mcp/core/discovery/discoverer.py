"""Enumerate test files in a repository and count their cases."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ...constants import MAX_TEST_FILES
from ..repository import Repository
from .classifier import count_tests, extract_test_cases, is_test_file
from .framework import detect_framework
from .models import TestCase, TestFile, TestFramework

logger = logging.getLogger(__name__)


def matches_path_filters(
    path: str,
    include_paths: list[str] | None = None,
    exclude_paths: list[str] | None = None
) -> bool:
    """Substring filters: include must match when given, exclude always removes."""
    if include_paths and not any(p in path for p in include_paths):
        return False
    if exclude_paths and any(p in path for p in exclude_paths):
        return False
    return True


def find_test_paths(
    repository: Repository,
    framework: TestFramework,
    include_paths: list[str] | None = None,
    exclude_paths: list[str] | None = None,
) -> list[str]:
    """Sorted test file paths for ``framework``, capped at MAX_TEST_FILES."""
    candidates = [
        path for path in repository.list_files()
        if is_test_file(path, framework)
        and matches_path_filters(path, include_paths, exclude_paths)
    ]

    if len(candidates) > MAX_TEST_FILES:
        logger.warning(
            "Found %d test files, keeping the first %d",
            len(candidates), MAX_TEST_FILES
        )
        candidates = candidates[:MAX_TEST_FILES]

    return sorted(candidates)


def build_test_files(
    contents: Mapping[str, str | None],
    framework: TestFramework,
    durations: Mapping[str, float] | None = None,
) -> list[TestFile]:
    """Fold read results into TestFiles, sorted by path. Unreadable files count 0."""
    durations = durations or {}
    return [
        TestFile(
            path=path,
            framework=framework,
            test_count=count_tests(content, framework) if content is not None else 0,
            last_duration=durations.get(path),
        )
        for path, content in sorted(contents.items())
    ]


def discover_tests(
    repository: Repository,
    framework: TestFramework | None = None,
    include_paths: list[str] | None = None,
    exclude_paths: list[str] | None = None,
    durations: Mapping[str, float] | None = None,
) -> list[TestFile]:
    """
    Find test files and count the cases in each.

    Files are read concurrently; the result is always sorted by path.
    Unreadable files are kept with a count of zero.

    Args:
        repository: Repository snapshot to scan
        framework: Framework override (detected when None)
        include_paths: Keep only paths containing one of these substrings
        exclude_paths: Drop paths containing any of these substrings
        durations: Latest recorded duration per test file path
    """
    detected = framework or detect_framework(repository)
    paths = find_test_paths(repository, detected, include_paths, exclude_paths)
    test_files = build_test_files(repository.read_many(paths), detected, durations)

    logger.debug("Discovered %d %s test files", len(test_files), detected)
    return test_files


def analyze_test_file(
    repository: Repository,
    test_file: str,
    framework: TestFramework | None = None
) -> list[TestCase]:
    """Extract the test cases of one file (empty when unreadable)."""
    content = repository.read_text(test_file)
    if content is None:
        return []
    return extract_test_cases(test_file, content, framework or detect_framework(repository))
