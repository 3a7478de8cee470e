"""Data models for normalized coverage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

RiskLevel = Literal["low", "medium", "high", "critical"]


@dataclass(frozen=True)
class CoverageMetric:
    """Covered/total counts with a percentage that is 0 when total is 0."""
    total: int = 0
    covered: int = 0

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(100.0, max(0.0, self.covered * 100 / self.total))

    @classmethod
    def of(cls, total: int, covered: int) -> CoverageMetric:
        total = max(0, total)
        return cls(total=total, covered=max(0, min(covered, total)))

    def __add__(self, other: CoverageMetric) -> CoverageMetric:
        return CoverageMetric(self.total + other.total, self.covered + other.covered)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "covered": self.covered,
            "percentage": round(self.percentage, 1),
        }


@dataclass(frozen=True)
class FileCoverage:
    """Coverage of a single source file."""
    path: str
    lines: CoverageMetric = field(default_factory=CoverageMetric)
    branches: CoverageMetric = field(default_factory=CoverageMetric)
    functions: CoverageMetric = field(default_factory=CoverageMetric)
    statements: CoverageMetric = field(default_factory=CoverageMetric)
    uncovered_lines: list[int] = field(default_factory=list)
    uncovered_functions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "lines": self.lines.to_dict(),
            "branches": self.branches.to_dict(),
            "functions": self.functions.to_dict(),
            "statements": self.statements.to_dict(),
            "uncovered_lines": self.uncovered_lines,
            "uncovered_functions": self.uncovered_functions,
        }


@dataclass(frozen=True)
class CoverageReport:
    """Coverage for a whole project, independent of the source format."""
    source_format: str
    files: list[FileCoverage] = field(default_factory=list)
    lines: CoverageMetric = field(default_factory=CoverageMetric)
    branches: CoverageMetric = field(default_factory=CoverageMetric)
    functions: CoverageMetric = field(default_factory=CoverageMetric)
    statements: CoverageMetric = field(default_factory=CoverageMetric)

    @classmethod
    def from_files(cls, source_format: str, files: list[FileCoverage]) -> CoverageReport:
        """Build a report whose totals are the sums of its files."""
        totals = {
            name: sum((getattr(f, name) for f in files), CoverageMetric())
            for name in ("lines", "branches", "functions", "statements")
        }
        return cls(source_format=source_format, files=files, **totals)

    def to_dict(self) -> dict:
        return {
            "format": self.source_format,
            "lines": self.lines.to_dict(),
            "branches": self.branches.to_dict(),
            "functions": self.functions.to_dict(),
            "statements": self.statements.to_dict(),
            "file_count": len(self.files),
        }


@dataclass(frozen=True)
class CoverageGap:
    """A file below the requested coverage, with a risk tier."""
    file: str
    coverage: float
    lines: list[int] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)
    risk: RiskLevel = "low"
    suggestion: str = ""

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "coverage": round(self.coverage, 1),
            "risk": self.risk,
            "uncovered_lines": self.lines,
            "uncovered_functions": self.functions,
            "suggestion": self.suggestion,
        }
