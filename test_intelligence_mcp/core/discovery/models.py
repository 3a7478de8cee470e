"""Data models for test discovery."""

from dataclasses import dataclass, field
from typing import Literal

TestFramework = Literal["jest", "mocha", "vitest", "pytest", "go-test", "junit"]
TestType = Literal["unit", "integration", "e2e", "performance", "snapshot"]
TestStatus = Literal["pass", "fail", "skip", "flaky"]


@dataclass(frozen=True)
class TestFile:
    """A file containing tests, as found by one discovery scan."""
    __test__ = False

    path: str
    framework: TestFramework
    test_count: int
    last_duration: float | None = None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "framework": self.framework,
            "test_count": self.test_count,
            "last_duration": self.last_duration,
        }


@dataclass(frozen=True)
class TestCase:
    """A single test case declared in a test file."""
    __test__ = False

    id: str
    name: str
    file: str
    line: int
    type: TestType = "unit"
    tags: tuple[str, ...] = field(default_factory=tuple)
    status: TestStatus = "pass"
    duration: float | None = None
    flaky_score: float | None = None

    @staticmethod
    def make_id(file: str, line: int, name: str) -> str:
        """Build the stable identity used to correlate history across scans."""
        return f"{file}:{line}:{name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "file": self.file,
            "line": self.line,
            "type": self.type,
            "tags": list(self.tags),
            "status": self.status,
            "duration": self.duration,
            "flaky_score": self.flaky_score,
        }
