"""Data models for impact analysis and test selection."""

from dataclasses import dataclass, field

from ..discovery.models import TestCase


@dataclass(frozen=True)
class FileImpact:
    """Impact of a change set on one test file."""
    file: str
    score: int
    changed_files: list[str] = field(default_factory=list)
    reason: str = ""


@dataclass(frozen=True)
class ImpactedTest:
    """A test case whose owning file is affected by the change set."""
    test_id: str
    test_name: str
    file: str
    impact_score: int
    reason: str
    changed_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "test_id": self.test_id,
            "name": self.test_name,
            "file": self.file,
            "impact_score": self.impact_score,
            "reason": self.reason,
            "changed_files": self.changed_files,
        }


@dataclass
class TestSelection:
    """
    Tiered selection of the discovered tests.

    must_run, should_run, can_skip and truncated partition the discovered
    tests. ``truncated`` holds tests dropped by a max_tests cap; they count
    as skipped in ``total_saved`` without being listed in ``can_skip``.
    """
    __test__ = False

    must_run: list[TestCase] = field(default_factory=list)
    should_run: list[TestCase] = field(default_factory=list)
    can_skip: list[TestCase] = field(default_factory=list)
    truncated: list[TestCase] = field(default_factory=list)
    exclusions: dict[str, str] = field(default_factory=dict)
    estimated_duration: float = 0.0
    confidence: float = 0.0

    @property
    def selected(self) -> list[TestCase]:
        return [*self.must_run, *self.should_run]

    @property
    def total_saved(self) -> int:
        return len(self.can_skip) + len(self.truncated)

    def to_dict(self, limit: int = 50) -> dict:
        def brief(tests: list[TestCase]) -> list[dict]:
            return [{"id": t.id, "name": t.name, "file": t.file} for t in tests[:limit]]

        return {
            "must_run": len(self.must_run),
            "should_run": len(self.should_run),
            "can_skip": len(self.can_skip),
            "truncated": len(self.truncated),
            "total_saved": self.total_saved,
            "estimated_duration_ms": round(self.estimated_duration),
            "confidence": round(self.confidence, 1),
            "tests": {
                "must_run": brief(self.must_run),
                "should_run": brief(self.should_run),
            },
            "exclusions": self.exclusions,
        }
