"""
Intelligence Service - validated entry points over a TestIntelligence engine.

Validation of caller input happens here and only here. The engine below
never fails on repository data; the service never fails on anything else.
"""

from __future__ import annotations

from datetime import datetime, timezone

from ..constants import (
    COVERAGE_RECOMMENDED,
    DEFAULT_SLOW_THRESHOLD_MS,
    FLAKY_HISTORY_DAYS,
    FLAKY_MIN_RUNS,
    FLAKY_PASS_RATE_THRESHOLD,
    FRAMEWORKS,
    TEST_TYPES,
)
from ..core.coverage import CoverageGap, CoverageReport
from ..core.discovery import TestCase, TestFile
from ..core.engine import TestIntelligence
from ..core.health import DuplicateTest, SlowTest, TestSuiteHealth
from ..core.history import FlakyTest, RunRecord, TestRunResult
from ..core.impact import ImpactedTest, TestSelection
from .base import ErrorCode, ServiceResult


class IntelligenceService:
    """
    Service for one workspace's test intelligence.

    Every method returns a ServiceResult. Failures are reserved for bad
    caller input; "nothing found" is a successful empty result.
    """

    def __init__(self, intelligence: TestIntelligence):
        self._intel = intelligence

    # =========================================================================
    # Discovery
    # =========================================================================

    def discover(
        self,
        framework: str | None = None,
        include_paths: list[str] | None = None,
        exclude_paths: list[str] | None = None,
    ) -> ServiceResult[list[TestFile]]:
        error = self._validate_framework(framework)
        if error:
            return error

        return ServiceResult.ok(self._intel.discover_tests(
            framework=framework,
            include_paths=include_paths,
            exclude_paths=exclude_paths,
        ))

    def analyze_file(
        self,
        test_file: str | None,
        framework: str | None = None,
    ) -> ServiceResult[list[TestCase]]:
        if not test_file:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'test_file' is required")

        error = self._validate_framework(framework)
        if error:
            return error

        error = self._validate_inside_workspace("test_file", test_file)
        if error:
            return error

        if not self._intel.snapshot().exists(test_file):
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                f"Test file not found: {test_file}"
            )

        return ServiceResult.ok(self._intel.analyze_test_file(test_file, framework=framework))

    # =========================================================================
    # Impact and selection
    # =========================================================================

    def impacted(
        self,
        changed_files: list[str] | None,
        depth: int = 2,
    ) -> ServiceResult[list[ImpactedTest]]:
        if changed_files is None:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'changed_files' is required")
        error = self._validate_changed_files(changed_files)
        if error:
            return error
        if depth < 1:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, "'depth' must be at least 1")

        return ServiceResult.ok(self._intel.get_impacted_tests(changed_files, depth=depth))

    def select(
        self,
        changed_files: list[str] | None,
        include_flaky: bool = False,
        max_tests: int | None = None,
        test_types: list[str] | None = None,
    ) -> ServiceResult[TestSelection]:
        if changed_files is None:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'changed_files' is required")
        error = self._validate_changed_files(changed_files)
        if error:
            return error
        if max_tests is not None and max_tests < 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'max_tests' must be a positive integer"
            )

        for test_type in test_types or []:
            error = self._validate_test_type(test_type)
            if error:
                return error

        return ServiceResult.ok(self._intel.select_tests(
            changed_files,
            include_flaky=include_flaky,
            max_tests=max_tests,
            test_types=test_types,
        ))

    # =========================================================================
    # History and flakiness
    # =========================================================================

    def record(self, results: list[dict] | None) -> ServiceResult[int]:
        """Record raw result dicts (test_id, passed, duration, ...)."""
        if not results:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'results' must not be empty")

        records = []
        for index, item in enumerate(results):
            parsed = self._parse_record(index, item)
            if not parsed.success:
                return ServiceResult.fail(
                    parsed.error.code,
                    parsed.error.message,
                    parsed.error.details
                )
            records.append(parsed.data)

        return ServiceResult.ok(self._intel.record_test_run(records))

    def history(
        self,
        test_id: str | None = None,
        days: int = FLAKY_HISTORY_DAYS,
    ) -> ServiceResult[dict[str, list[TestRunResult]]]:
        if days < 1:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, "'days' must be at least 1")
        return ServiceResult.ok(self._intel.get_test_history(test_id, days=days))

    def detect_flaky(
        self,
        history_days: int = FLAKY_HISTORY_DAYS,
        min_runs: int = FLAKY_MIN_RUNS,
        flaky_threshold: float = FLAKY_PASS_RATE_THRESHOLD,
    ) -> ServiceResult[list[FlakyTest]]:
        if history_days < 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, "'history_days' must be at least 1"
            )
        if min_runs < 1:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, "'min_runs' must be at least 1")
        if not 0 < flaky_threshold <= 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'flaky_threshold' must be in (0, 1]"
            )

        return ServiceResult.ok(self._intel.detect_flaky_tests(
            history_days=history_days,
            min_runs=min_runs,
            flaky_threshold=flaky_threshold,
        ))

    def analyze_flaky(
        self,
        test_id: str | None,
        history_days: int = FLAKY_HISTORY_DAYS,
    ) -> ServiceResult[FlakyTest | None]:
        if not test_id:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'test_id' is required")
        return ServiceResult.ok(self._intel.analyze_flaky_test(test_id, history_days))

    def quarantine(self, test_id: str | None, reason: str | None) -> ServiceResult[bool]:
        if not test_id:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'test_id' is required")
        if not reason:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'reason' is required")
        return ServiceResult.ok(self._intel.quarantine_test(test_id, reason))

    def release(self, test_id: str | None) -> ServiceResult[bool]:
        if not test_id:
            return ServiceResult.fail(ErrorCode.MISSING_INPUT, "'test_id' is required")
        return ServiceResult.ok(self._intel.release_test(test_id))

    def quarantined(self) -> ServiceResult[dict[str, str]]:
        return ServiceResult.ok(self._intel.quarantined_tests())

    # =========================================================================
    # Coverage
    # =========================================================================

    def coverage(self, report_path: str | None = None) -> ServiceResult[CoverageReport | None]:
        if report_path:
            error = self._validate_inside_workspace("report_path", report_path)
            if error:
                return error
        return ServiceResult.ok(self._intel.analyze_coverage(report_path))

    def coverage_gaps(
        self,
        min_coverage: float = COVERAGE_RECOMMENDED,
        focus_files: list[str] | None = None,
        ignore_generated: bool = True,
        report_path: str | None = None,
    ) -> ServiceResult[list[CoverageGap]]:
        if not 0 <= min_coverage <= 100:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'min_coverage' must be between 0 and 100"
            )
        if report_path:
            error = self._validate_inside_workspace("report_path", report_path)
            if error:
                return error

        return ServiceResult.ok(self._intel.find_coverage_gaps(
            min_coverage=min_coverage,
            focus_files=focus_files,
            ignore_generated=ignore_generated,
            report_path=report_path,
        ))

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> ServiceResult[TestSuiteHealth]:
        return ServiceResult.ok(self._intel.get_test_health())

    def slow_tests(
        self,
        threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
        test_type: str | None = None,
    ) -> ServiceResult[list[SlowTest]]:
        if threshold_ms < 0:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, "'threshold_ms' must not be negative"
            )
        if test_type:
            error = self._validate_test_type(test_type)
            if error:
                return error

        return ServiceResult.ok(self._intel.find_slow_tests(threshold_ms, test_type))

    def duplicates(self, similarity_threshold: float = 0.8) -> ServiceResult[list[DuplicateTest]]:
        if not 0 < similarity_threshold <= 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'similarity_threshold' must be in (0, 1]"
            )
        return ServiceResult.ok(self._intel.find_duplicate_tests(similarity_threshold))

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _validate_framework(self, framework: str | None) -> ServiceResult | None:
        if framework is not None and framework not in FRAMEWORKS:
            return ServiceResult.fail(
                ErrorCode.UNKNOWN_FRAMEWORK,
                f"Unknown framework: {framework}",
                details={"allowed": list(FRAMEWORKS)}
            )
        return None

    def _validate_inside_workspace(self, name: str, path: str) -> ServiceResult | None:
        if self._intel.snapshot().resolve(path) is None:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"'{name}' must be inside the workspace: {path}"
            )
        return None

    def _validate_changed_files(self, changed_files: object) -> ServiceResult | None:
        if not isinstance(changed_files, list) or not all(
            isinstance(path, str) for path in changed_files
        ):
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'changed_files' must be a list of paths"
            )
        return None

    def _validate_test_type(self, test_type: str) -> ServiceResult | None:
        if test_type not in TEST_TYPES:
            return ServiceResult.fail(
                ErrorCode.UNKNOWN_TEST_TYPE,
                f"Unknown test type: {test_type}",
                details={"allowed": list(TEST_TYPES)}
            )
        return None

    def _parse_record(self, index: int, item: dict) -> ServiceResult[RunRecord]:
        if not isinstance(item, dict):
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, f"results[{index}] must be an object"
            )

        test_id = item.get("test_id")
        if not test_id:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, f"results[{index}].test_id is required"
            )
        for key in ("test_id", "test_name", "file", "error", "timestamp"):
            if item.get(key) is not None and not isinstance(item[key], str):
                return ServiceResult.fail(
                    ErrorCode.VALIDATION_ERROR, f"results[{index}].{key} must be a string"
                )
        if not isinstance(item.get("passed"), bool):
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, f"results[{index}].passed must be a boolean"
            )

        duration = item.get("duration", 0)
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR, f"results[{index}].duration must be a number"
            )

        timestamp = None
        if item.get("timestamp"):
            try:
                timestamp = parse_timestamp(item["timestamp"])
            except (AttributeError, TypeError, ValueError):
                return ServiceResult.fail(
                    ErrorCode.VALIDATION_ERROR,
                    f"results[{index}].timestamp must be ISO-8601"
                )

        return ServiceResult.ok(RunRecord(
            test_id=test_id,
            passed=item["passed"],
            duration=float(duration),
            test_name=item.get("test_name") or "",
            file=item.get("file") or "",
            error=item.get("error"),
            timestamp=timestamp,
        ))


def parse_timestamp(value: str) -> datetime:
    """Parse ISO-8601 (``Z`` suffix allowed); naive values are taken as UTC."""
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, not {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
