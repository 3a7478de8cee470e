"""History - bounded run history, quarantine and flaky test detection."""

from .flaky import (
    analyze_runs,
    detect_causes,
    detect_flaky_tests,
    pass_rate,
    recommend,
    transition_score,
    within_window,
)
from .models import FlakyCause, FlakyTest, RunRecord, TestRunResult
from .store import QuarantineRegistry, RunHistoryStore, RunRing

__all__ = [
    "RunRing",
    "RunHistoryStore",
    "QuarantineRegistry",
    "detect_flaky_tests",
    "analyze_runs",
    "detect_causes",
    "pass_rate",
    "recommend",
    "transition_score",
    "within_window",
    "FlakyCause",
    "FlakyTest",
    "RunRecord",
    "TestRunResult",
]
