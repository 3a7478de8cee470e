"""Coverage - report normalization and gap analysis."""

from .gaps import find_coverage_gaps, is_generated, risk_for, suggest
from .models import CoverageGap, CoverageMetric, CoverageReport, FileCoverage, RiskLevel
from .parser import parse_coverage_py, parse_coverage_report, parse_istanbul, parse_lcov

__all__ = [
    "parse_coverage_report",
    "parse_istanbul",
    "parse_lcov",
    "parse_coverage_py",
    "find_coverage_gaps",
    "is_generated",
    "risk_for",
    "suggest",
    "CoverageGap",
    "CoverageMetric",
    "CoverageReport",
    "FileCoverage",
    "RiskLevel",
]
