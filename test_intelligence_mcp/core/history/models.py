"""Data models for run history and flakiness."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

FlakyCause = Literal[
    "timing",       # Race conditions, timeouts
    "external",     # External service dependencies
    "state",        # Shared state issues
    "random",       # Random data in tests
    "order",        # Test order dependency
    "resource",     # Resource contention
    "environment",  # Environment-specific
]


@dataclass(frozen=True)
class TestRunResult:
    """One recorded outcome of one test."""
    __test__ = False

    timestamp: datetime
    passed: bool
    duration: float
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "passed": self.passed,
            "duration": self.duration,
            "error": self.error,
        }


@dataclass(frozen=True)
class RunRecord:
    """A result to be recorded, as supplied by the caller."""
    test_id: str
    passed: bool
    duration: float
    test_name: str = ""
    file: str = ""
    error: str | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True)
class FlakyTest:
    """Flakiness analysis of one test, derived from its history."""
    test_id: str
    test_name: str
    file: str
    flaky_score: float
    pass_rate: float
    recent_runs: list[TestRunResult] = field(default_factory=list)
    suspected_causes: list[FlakyCause] = field(default_factory=list)
    recommendation: str = ""

    def to_dict(self, include_runs: bool = True) -> dict:
        result = {
            "test_id": self.test_id,
            "test_name": self.test_name,
            "file": self.file,
            "flaky_score": round(self.flaky_score, 1),
            "pass_rate": round(self.pass_rate, 3),
            "suspected_causes": list(self.suspected_causes),
            "recommendation": self.recommendation,
        }
        if include_runs:
            result["recent_runs"] = [r.to_dict() for r in self.recent_runs]
        return result
