"""Parse coverage artifacts into a CoverageReport.

Supported shapes:
- Istanbul ``coverage-final.json``: statement/branch/function hit-maps per file
- coverage.py JSON (``coverage json``): per-file summaries plus missing lines
- LCOV ``lcov.info``: line-oriented per-file records

Parsing never raises: anything unrecognizable yields None.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .models import CoverageMetric, CoverageReport, FileCoverage

logger = logging.getLogger(__name__)


def parse_coverage_report(content: str) -> CoverageReport | None:
    """Try JSON formats first, then LCOV, then give up."""
    if not content or not content.strip():
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return parse_lcov(content)

    try:
        if _is_coverage_py(data):
            return parse_coverage_py(data)
        if _is_istanbul(data):
            return parse_istanbul(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Malformed coverage JSON: %s", e)
        return None

    logger.debug("JSON coverage artifact has no recognizable shape")
    return None


# =============================================================================
# Istanbul
# =============================================================================

def _is_istanbul(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and bool(data)
        and all(isinstance(v, dict) for v in data.values())
        and any("s" in v or "statementMap" in v for v in data.values())
    )


def parse_istanbul(data: dict) -> CoverageReport:
    files = [
        _istanbul_file(file_data.get("path") or path, file_data)
        for path, file_data in data.items()
    ]
    return CoverageReport.from_files("istanbul", files)


def _istanbul_file(path: str, cov: dict) -> FileCoverage:
    hits = {str(k): int(v) for k, v in (cov.get("s") or {}).items()}
    branch_hits = [int(h) for counts in (cov.get("b") or {}).values() for h in counts]
    function_hits = {str(k): int(v) for k, v in (cov.get("f") or {}).items()}
    statement_map = cov.get("statementMap") or {}
    fn_map = cov.get("fnMap") or {}

    statements = CoverageMetric.of(len(hits), sum(1 for h in hits.values() if h > 0))

    # Line view: a line is covered when any statement starting on it ran
    line_hits: dict[int, int] = {}
    for statement_id, count in hits.items():
        location = statement_map.get(statement_id)
        if location:
            line = int(location["start"]["line"])
        elif statement_id.isdigit():
            line = int(statement_id)
        else:
            continue
        line_hits[line] = max(line_hits.get(line, 0), count)

    if statement_map:
        lines = CoverageMetric.of(len(line_hits), sum(1 for h in line_hits.values() if h > 0))
    else:
        lines = statements

    uncovered_functions = [
        fn_map[fn_id].get("name", fn_id) if fn_id in fn_map else fn_id
        for fn_id, count in function_hits.items()
        if count == 0
    ]

    return FileCoverage(
        path=path,
        lines=lines,
        statements=statements,
        branches=CoverageMetric.of(len(branch_hits), sum(1 for h in branch_hits if h > 0)),
        functions=CoverageMetric.of(
            len(function_hits), sum(1 for h in function_hits.values() if h > 0)
        ),
        uncovered_lines=sorted(line for line, count in line_hits.items() if count == 0),
        uncovered_functions=uncovered_functions,
    )


# =============================================================================
# coverage.py JSON
# =============================================================================

def _is_coverage_py(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and isinstance(data.get("files"), dict)
        and ("totals" in data or "meta" in data)
    )


def parse_coverage_py(data: dict) -> CoverageReport:
    files = []

    for path, file_data in data["files"].items():
        summary = file_data.get("summary", {})
        statements = CoverageMetric.of(
            int(summary.get("num_statements", 0)),
            int(summary.get("covered_lines", 0)),
        )

        functions = CoverageMetric()
        uncovered_functions = []
        for name, fn_data in (file_data.get("functions") or {}).items():
            if not name:
                continue  # module-level code
            fn_summary = fn_data.get("summary", {})
            covered = int(fn_summary.get("covered_lines", 0)) > 0
            functions = functions + CoverageMetric(1, 1 if covered else 0)
            if not covered:
                uncovered_functions.append(name)

        files.append(FileCoverage(
            path=path,
            lines=statements,
            statements=statements,
            branches=CoverageMetric.of(
                int(summary.get("num_branches", 0)),
                int(summary.get("covered_branches", 0)),
            ),
            functions=functions,
            uncovered_lines=sorted(int(n) for n in file_data.get("missing_lines", [])),
            uncovered_functions=uncovered_functions,
        ))

    return CoverageReport.from_files("coverage.py", files)


# =============================================================================
# LCOV
# =============================================================================

class _LcovRecord:
    """Accumulates one SF...end_of_record block."""

    def __init__(self, path: str):
        self.path = path
        self.line_hits: dict[int, int] = {}
        self.lines_found: int | None = None
        self.lines_hit: int | None = None
        self.branches_found = 0
        self.branches_hit = 0
        self.functions_found: int | None = None
        self.functions_hit: int | None = None
        self.function_hits: dict[str, int] = {}

    def build(self) -> FileCoverage:
        lines_found = self.lines_found if self.lines_found is not None else len(self.line_hits)
        lines_hit = (
            self.lines_hit if self.lines_hit is not None
            else sum(1 for h in self.line_hits.values() if h > 0)
        )
        functions_found = (
            self.functions_found if self.functions_found is not None
            else len(self.function_hits)
        )
        functions_hit = (
            self.functions_hit if self.functions_hit is not None
            else sum(1 for h in self.function_hits.values() if h > 0)
        )
        lines = CoverageMetric.of(lines_found, lines_hit)

        return FileCoverage(
            path=self.path,
            lines=lines,
            statements=lines,
            branches=CoverageMetric.of(self.branches_found, self.branches_hit),
            functions=CoverageMetric.of(functions_found, functions_hit),
            uncovered_lines=sorted(n for n, h in self.line_hits.items() if h == 0),
            uncovered_functions=[n for n, h in self.function_hits.items() if h == 0],
        )


def parse_lcov(content: str) -> CoverageReport | None:
    files: list[FileCoverage] = []
    record: _LcovRecord | None = None

    for raw_line in content.splitlines():
        line = raw_line.strip()
        tag, _, value = line.partition(":")

        try:
            if tag == "SF":
                if record:
                    files.append(record.build())
                record = _LcovRecord(value)
            elif record is None:
                continue
            elif line == "end_of_record":
                files.append(record.build())
                record = None
            elif tag == "DA":
                number, hits = value.split(",")[:2]
                record.line_hits[int(number)] = int(hits)
            elif tag == "LF":
                record.lines_found = int(value)
            elif tag == "LH":
                record.lines_hit = int(value)
            elif tag == "BRF":
                record.branches_found = int(value)
            elif tag == "BRH":
                record.branches_hit = int(value)
            elif tag == "FNF":
                record.functions_found = int(value)
            elif tag == "FNH":
                record.functions_hit = int(value)
            elif tag == "FN":
                name = value.rsplit(",", 1)[-1]
                record.function_hits.setdefault(name, 0)
            elif tag == "FNDA":
                hits, name = value.split(",", 1)
                record.function_hits[name] = int(hits)
        except ValueError:
            logger.debug("Skipping malformed LCOV line: %s", line)

    if record:
        files.append(record.build())

    if not files:
        return None
    return CoverageReport.from_files("lcov", files)
