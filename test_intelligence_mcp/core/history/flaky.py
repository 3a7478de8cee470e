"""Flaky test detection over recorded run history.

The flakiness signal is transition density: how often consecutive runs flip
between pass and fail. Pass rate decides *whether* a test is flaky (a test
that always fails is broken, not flaky); transitions decide *how* flaky.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone

from ...constants import (
    FLAKY_HISTORY_DAYS,
    FLAKY_MIN_RUNS,
    FLAKY_PASS_RATE_THRESHOLD,
    RECENT_RUNS_LIMIT,
)
from .models import FlakyCause, FlakyTest, TestRunResult

# Error text vocabularies, matched case-insensitively
EXTERNAL_ERROR_MARKERS = (
    "timeout", "timed out", "econnrefused", "econnreset", "network",
    "connection refused", "connection reset", "socket hang up",
)
STATE_ERROR_MARKERS = ("already exists", "not found", "undefined")

TIMING_VARIANCE_RATIO = 0.5
FAILING_PASS_RATE = 0.5

RECOMMENDATIONS: dict[str, str] = {
    "timing": "Add explicit waits or increase timeouts. Consider using fake timers.",
    "external": "Mock external services. Use contract tests for integration points.",
    "state": "Ensure proper test isolation. Reset shared state in setup/teardown.",
    "random": "Use seeded random generators or fixed test data.",
    "order": "Make test independent. Don't rely on test execution order.",
    "resource": "Add resource locks or run in isolation mode.",
    "environment": "Use containers or VM for consistent environment.",
}
FIX_OR_REMOVE = (
    "This test fails more than it passes. "
    "Consider fixing the underlying issue or removing the test."
)


def transition_score(runs: Sequence[TestRunResult]) -> float:
    """Pass/fail flips per interval, as 0-100. Zero for one run or none."""
    if len(runs) < 2:
        return 0.0

    transitions = sum(
        1 for previous, current in zip(runs, runs[1:])
        if previous.passed != current.passed
    )
    return min(100.0, transitions * 100 / (len(runs) - 1))


def pass_rate(runs: Sequence[TestRunResult]) -> float:
    if not runs:
        return 0.0
    return sum(1 for r in runs if r.passed) / len(runs)


def detect_causes(runs: Sequence[TestRunResult]) -> list[FlakyCause]:
    """Guess why a test flakes from duration spread and error text."""
    causes: list[FlakyCause] = []
    if not runs:
        return ["timing"]

    durations = [r.duration for r in runs]
    mean = sum(durations) / len(durations)
    variance = sum((d - mean) ** 2 for d in durations) / len(durations)
    if variance > mean * TIMING_VARIANCE_RATIO:
        causes.append("timing")

    errors = [r.error.lower() for r in runs if r.error]

    if any(marker in e for e in errors for marker in EXTERNAL_ERROR_MARKERS):
        causes.append("external")

    if any(marker in e for e in errors for marker in STATE_ERROR_MARKERS):
        causes.append("state")

    if any("expected" in e and "received" in e for e in errors):
        causes.append("random")

    return causes or ["timing"]


def recommend(causes: Sequence[FlakyCause], rate: float) -> str:
    if rate < FAILING_PASS_RATE:
        return FIX_OR_REMOVE
    return " ".join(RECOMMENDATIONS[c] for c in causes)


def split_test_id(test_id: str) -> tuple[str, str]:
    """Return (file, name) from a ``file:line:name`` id, tolerating other shapes."""
    parts = test_id.split(":", 2)
    if len(parts) == 3:
        return parts[0], parts[2] or test_id
    return "", test_id


def within_window(
    runs: Sequence[TestRunResult],
    days: int,
    now: datetime | None = None
) -> list[TestRunResult]:
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    return [r for r in runs if r.timestamp >= cutoff]


def analyze_runs(
    test_id: str,
    runs: Sequence[TestRunResult],
    test_name: str | None = None,
    file: str | None = None,
) -> FlakyTest:
    """Score one test's runs regardless of whether it qualifies as flaky."""
    parsed_file, parsed_name = split_test_id(test_id)
    rate = pass_rate(runs)
    causes = detect_causes(runs)

    return FlakyTest(
        test_id=test_id,
        test_name=test_name or parsed_name,
        file=file or parsed_file,
        flaky_score=transition_score(runs),
        pass_rate=rate,
        recent_runs=list(runs[-RECENT_RUNS_LIMIT:]),
        suspected_causes=causes,
        recommendation=recommend(causes, rate),
    )


def detect_flaky_tests(
    history: Mapping[str, Sequence[TestRunResult]],
    history_days: int = FLAKY_HISTORY_DAYS,
    min_runs: int = FLAKY_MIN_RUNS,
    flaky_threshold: float = FLAKY_PASS_RATE_THRESHOLD,
    now: datetime | None = None,
) -> list[FlakyTest]:
    """
    Flag tests whose windowed pass rate is strictly between 0 and the threshold.

    Args:
        history: Chronological runs per test id (a snapshot, not live data)
        history_days: Only runs newer than this many days count
        min_runs: Tests with fewer qualifying runs are skipped
        flaky_threshold: Pass rate below which a test is flaky
        now: Reference time for the window

    Returns:
        Flaky tests, highest score first, ties by test id
    """
    flaky = []

    for test_id, runs in history.items():
        recent = within_window(runs, history_days, now)
        if len(recent) < min_runs:
            continue

        rate = pass_rate(recent)
        if 0 < rate < flaky_threshold:
            flaky.append(analyze_runs(test_id, recent))

    return sorted(flaky, key=lambda t: (-t.flaky_score, t.test_id))
