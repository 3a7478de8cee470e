"""Health - suite health score, slow and duplicate tests."""

from .models import DuplicateTest, SlowTest, TestSuiteHealth
from .scorer import (
    critical_paths,
    find_duplicate_tests,
    find_slow_tests,
    health_score,
    score_health,
)

__all__ = [
    "score_health",
    "health_score",
    "critical_paths",
    "find_slow_tests",
    "find_duplicate_tests",
    "DuplicateTest",
    "SlowTest",
    "TestSuiteHealth",
]
