"""Tier discovered tests into must-run / should-run / can-skip."""

from __future__ import annotations

from collections.abc import Container, Mapping

from ...constants import (
    FLAKY_SCORE_THRESHOLD,
    MUST_RUN_SCORE,
    SHOULD_RUN_SCORE,
    SLOW_TEST_THRESHOLD_MS,
)
from ..discovery.models import TestCase
from .analyzer import base_name, normalize_path
from .models import FileImpact, TestSelection


def exclusion_reason(
    case: TestCase,
    include_flaky: bool,
    test_types: list[str] | None,
    quarantined: Container[str],
) -> str | None:
    """Why a test is forced into can_skip regardless of impact (None if it isn't)."""
    if test_types and case.type not in test_types:
        return "type"
    if (
        not include_flaky
        and case.flaky_score is not None
        and case.flaky_score > FLAKY_SCORE_THRESHOLD
    ):
        return "flaky"
    if case.id in quarantined:
        return "quarantined"
    return None


def estimate_duration(tests: list[TestCase]) -> float:
    """Recorded durations, or half the type's slow threshold when unknown (ms)."""
    return sum(
        t.duration if t.duration is not None else SLOW_TEST_THRESHOLD_MS[t.type] / 2
        for t in tests
    )


def selection_confidence(changed_files: list[str], selected: list[TestCase]) -> float:
    """
    50 plus up to 50 for the share of changed files matched by a selected test.

    With no changed files every test is trivially accounted for, so the
    confidence is 100.
    """
    if not changed_files:
        return 100.0

    matched = 0
    for changed in changed_files:
        name = base_name(normalize_path(changed))
        if name and any(name in t.file for t in selected):
            matched += 1

    return min(100.0, 50 + matched / len(changed_files) * 50)


def select_tests(
    cases_by_file: Mapping[str, list[TestCase]],
    impacts: Mapping[str, FileImpact],
    changed_files: list[str],
    include_flaky: bool = False,
    max_tests: int | None = None,
    test_types: list[str] | None = None,
    quarantined: Container[str] = frozenset(),
) -> TestSelection:
    """
    Partition every discovered test case by the impact of its file.

    Type filter, flakiness and quarantine win over impact. A max_tests cap
    keeps must_run first, then fills from should_run in order; the rest go
    to ``truncated``.
    """
    must_run: list[TestCase] = []
    should_run: list[TestCase] = []
    can_skip: list[TestCase] = []
    exclusions: dict[str, str] = {}

    for path in sorted(cases_by_file):
        impact = impacts.get(path)
        score = impact.score if impact else 0

        for case in cases_by_file[path]:
            reason = exclusion_reason(case, include_flaky, test_types, quarantined)
            if reason:
                exclusions[case.id] = reason
                can_skip.append(case)
            elif score > MUST_RUN_SCORE:
                must_run.append(case)
            elif score > SHOULD_RUN_SCORE:
                should_run.append(case)
            else:
                can_skip.append(case)

    truncated: list[TestCase] = []
    if max_tests is not None:
        truncated = must_run[max_tests:]
        must_run = must_run[:max_tests]
        capacity = max_tests - len(must_run)
        truncated += should_run[capacity:]
        should_run = should_run[:capacity]

    selected = [*must_run, *should_run]

    return TestSelection(
        must_run=must_run,
        should_run=should_run,
        can_skip=can_skip,
        truncated=truncated,
        exclusions=exclusions,
        estimated_duration=estimate_duration(selected),
        confidence=selection_confidence(changed_files, selected),
    )
