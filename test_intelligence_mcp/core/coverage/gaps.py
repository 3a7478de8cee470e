"""Coverage gap analysis: files below a minimum, tiered by risk."""

from __future__ import annotations

from ...constants import COVERAGE_RECOMMENDED, GENERATED_FILE_MARKERS
from .models import CoverageGap, CoverageReport, FileCoverage, RiskLevel

RISK_ORDER: dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}

# Upper bounds (exclusive) for each tier; anything else is low
RISK_BANDS: tuple[tuple[float, RiskLevel], ...] = (
    (50.0, "critical"),
    (60.0, "high"),
    (70.0, "medium"),
)


def risk_for(percentage: float) -> RiskLevel:
    for bound, risk in RISK_BANDS:
        if percentage < bound:
            return risk
    return "low"


def is_generated(path: str) -> bool:
    normalized = "/" + path.replace("\\", "/")
    return any(marker in normalized for marker in GENERATED_FILE_MARKERS)


def suggest(file: FileCoverage) -> str:
    if file.lines.percentage < 20:
        return "This file has very low coverage. Consider adding basic happy-path tests first."
    if file.functions.total and file.functions.percentage < file.lines.percentage:
        return "Many functions are not called. Add tests for untested functions."
    if file.branches.total and file.branches.percentage < file.lines.percentage:
        return "Branch coverage is low. Add tests for edge cases and error paths."

    shown = ", ".join(str(n) for n in file.uncovered_lines[:5])
    more = "..." if len(file.uncovered_lines) > 5 else ""
    return f"Add tests for lines: {shown}{more}"


def find_coverage_gaps(
    report: CoverageReport | None,
    min_coverage: float = COVERAGE_RECOMMENDED,
    focus_files: list[str] | None = None,
    ignore_generated: bool = True,
) -> list[CoverageGap]:
    """
    List files whose line coverage is below ``min_coverage``.

    Args:
        report: Normalized coverage (None yields no gaps)
        min_coverage: Minimum acceptable line coverage percentage
        focus_files: Only consider paths containing one of these substrings
        ignore_generated: Skip generated sources

    Returns:
        Gaps ordered critical first; report order is kept within a tier
    """
    if report is None:
        return []

    gaps = []
    for file in report.files:
        if focus_files and not any(f in file.path for f in focus_files):
            continue
        if ignore_generated and is_generated(file.path):
            continue

        percentage = file.lines.percentage
        if percentage >= min_coverage:
            continue

        gaps.append(CoverageGap(
            file=file.path,
            coverage=percentage,
            lines=list(file.uncovered_lines),
            functions=list(file.uncovered_functions),
            risk=risk_for(percentage),
            suggestion=suggest(file),
        ))

    return sorted(gaps, key=lambda g: RISK_ORDER[g.risk])
