"""Suite health scoring, slow test and duplicate test detection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from difflib import SequenceMatcher

from ...constants import (
    COVERAGE_MINIMUM,
    CRITICAL_PATH_COVERAGE,
    DEFAULT_SLOW_THRESHOLD_MS,
    FLAKY_PENALTY_PER_TEST,
    HEALTH_BASELINE_CREDIT,
    HEALTH_COVERAGE_WEIGHT,
    HEALTH_FLAKY_WEIGHT,
    SLOW_TEST_RATIO,
)
from ..coverage.models import CoverageReport
from ..discovery.models import TestCase
from ..history.flaky import split_test_id
from ..history.models import TestRunResult
from .models import DuplicateTest, SlowTest, TestSuiteHealth

DUPLICATE_SIMILARITY = 0.8


def health_score(coverage_percentage: float, flaky_count: int) -> int:
    """
    round(coverage * 0.5 + flaky_penalty_score * 0.3 + 20), clamped to 0-100.

    The +20 is a fixed baseline credit (HEALTH_BASELINE_CREDIT), tunable.
    """
    flaky_penalty_score = max(0, 100 - FLAKY_PENALTY_PER_TEST * flaky_count)
    score = round(
        coverage_percentage * HEALTH_COVERAGE_WEIGHT
        + flaky_penalty_score * HEALTH_FLAKY_WEIGHT
        + HEALTH_BASELINE_CREDIT
    )
    return min(100, max(0, score))


def critical_paths(coverage: CoverageReport | None) -> list[str]:
    if coverage is None:
        return []
    return [
        f.path for f in coverage.files
        if f.lines.total and f.lines.percentage < CRITICAL_PATH_COVERAGE
    ]


def score_health(
    total_tests: int,
    coverage: CoverageReport | None,
    flaky_count: int,
    slow_count: int,
    duplicate_count: int = 0,
) -> TestSuiteHealth:
    """Combine coverage, flakiness and slowness into one health snapshot."""
    coverage_percentage = coverage.lines.percentage if coverage else 0.0
    recommendations = []

    if coverage_percentage < COVERAGE_MINIMUM:
        recommendations.append(
            f"Coverage is below {COVERAGE_MINIMUM:g}%. Add more tests."
        )
    if flaky_count > 0:
        recommendations.append(
            f"{flaky_count} flaky tests detected. Fix or quarantine them."
        )
    if slow_count > total_tests * SLOW_TEST_RATIO:
        recommendations.append(
            "More than 10% of tests are slow. Consider optimization."
        )
    if duplicate_count > 0:
        recommendations.append(
            f"{duplicate_count} near-duplicate test names found. Merge or rename them."
        )

    return TestSuiteHealth(
        overall_score=health_score(coverage_percentage, flaky_count),
        coverage=coverage_percentage,
        total_tests=total_tests,
        flaky_test_count=flaky_count,
        slow_test_count=slow_count,
        duplicate_tests=duplicate_count,
        uncovered_critical_paths=critical_paths(coverage),
        recommendations=recommendations,
    )


def find_slow_tests(
    history: Mapping[str, list[TestRunResult]],
    threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
    cases: Mapping[str, TestCase] | None = None,
    test_type: str | None = None,
) -> list[SlowTest]:
    """Tests whose most recent run took longer than ``threshold_ms``, slowest first."""
    cases = cases or {}
    slow = []

    for test_id, runs in history.items():
        if not runs or runs[-1].duration <= threshold_ms:
            continue

        case = cases.get(test_id)
        kind = case.type if case else None
        if test_type and kind != test_type:
            continue

        file, name = split_test_id(test_id)
        slow.append(SlowTest(
            test_id=test_id,
            test_name=case.name if case else name,
            file=case.file if case else file,
            duration=runs[-1].duration,
            type=kind,
        ))

    return sorted(slow, key=lambda t: (-t.duration, t.test_id))


def _normalize_name(name: str) -> str:
    name = re.sub(r"[_\W]+", " ", name.lower())
    return re.sub(r"^test\s+", "", name).strip()


def find_duplicate_tests(
    cases_by_file: Mapping[str, list[TestCase]],
    similarity_threshold: float = DUPLICATE_SIMILARITY,
) -> list[DuplicateTest]:
    """Pairs of same-file test cases whose normalized names are this similar."""
    duplicates = []

    for path in sorted(cases_by_file):
        cases = cases_by_file[path]
        names = [_normalize_name(c.name) for c in cases]

        for i in range(len(cases)):
            for j in range(i + 1, len(cases)):
                ratio = SequenceMatcher(None, names[i], names[j]).ratio()
                if ratio >= similarity_threshold:
                    duplicates.append(DuplicateTest(
                        file=path,
                        first=cases[i].id,
                        second=cases[j].id,
                        similarity=ratio,
                    ))

    return duplicates
