"""Data models for suite health."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SlowTest:
    test_id: str
    test_name: str
    file: str
    duration: float
    type: str | None = None

    def to_dict(self) -> dict:
        return {
            "test_id": self.test_id,
            "name": self.test_name,
            "file": self.file,
            "duration_ms": self.duration,
            "type": self.type,
        }


@dataclass(frozen=True)
class DuplicateTest:
    """Two test cases in one file with near-identical names."""
    file: str
    first: str
    second: str
    similarity: float

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "first": self.first,
            "second": self.second,
            "similarity": round(self.similarity, 2),
        }


@dataclass(frozen=True)
class TestSuiteHealth:
    __test__ = False

    overall_score: int
    coverage: float
    total_tests: int = 0
    flaky_test_count: int = 0
    slow_test_count: int = 0
    duplicate_tests: int = 0
    uncovered_critical_paths: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self, include_recommendations: bool = True) -> dict:
        result = {
            "overall_score": self.overall_score,
            "coverage": round(self.coverage, 1),
            "total_tests": self.total_tests,
            "flaky_tests": self.flaky_test_count,
            "slow_tests": self.slow_test_count,
            "duplicate_tests": self.duplicate_tests,
            "uncovered_critical_paths": self.uncovered_critical_paths,
        }
        if include_recommendations:
            result["recommendations"] = self.recommendations
        return result
