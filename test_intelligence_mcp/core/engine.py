"""Per-repository test intelligence handle.

A TestIntelligence owns the only long-lived state of the system: the run
history and the quarantine registry. Everything else is recomputed from a
fresh repository snapshot on every call.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path

from ..constants import (
    COVERAGE_RECOMMENDED,
    DEFAULT_SLOW_THRESHOLD_MS,
    FLAKY_HISTORY_DAYS,
    FLAKY_MIN_RUNS,
    FLAKY_PASS_RATE_THRESHOLD,
    FLAKY_SCORE_THRESHOLD,
)
from .coverage import CoverageGap, CoverageReport, find_coverage_gaps, parse_coverage_report
from .discovery import (
    TestCase,
    TestFile,
    TestFramework,
    analyze_test_file,
    build_test_files,
    detect_framework,
    discover_tests,
    extract_test_cases,
    find_test_paths,
)
from .health import (
    DuplicateTest,
    SlowTest,
    TestSuiteHealth,
    find_duplicate_tests,
    find_slow_tests,
    score_health,
)
from .history import (
    FlakyTest,
    QuarantineRegistry,
    RunHistoryStore,
    RunRecord,
    TestRunResult,
    analyze_runs,
    detect_flaky_tests,
    transition_score,
    within_window,
)
from .impact import ImpactedTest, TestSelection, impacted_tests, score_test_files, select_tests
from .repository import Repository

logger = logging.getLogger(__name__)


class TestIntelligence:
    """
    Test intelligence for one repository.

    Usage:
        intel = TestIntelligence("/path/to/repo")
        intel.record_test_run([RunRecord(test_id="a.test.ts:3:adds", passed=True, duration=12)])
        selection = intel.select_tests(["src/user.ts"])
    """

    __test__ = False

    def __init__(
        self,
        root: str | Path,
        history: RunHistoryStore | None = None,
        quarantine: QuarantineRegistry | None = None,
        repository_factory: Callable[[Path], Repository] = Repository,
    ):
        self.root = Path(root)
        self.history = history or RunHistoryStore()
        self.quarantine = quarantine or QuarantineRegistry()
        self._repository_factory = repository_factory

    def snapshot(self) -> Repository:
        """A fresh view of the tree, taken at call time."""
        return self._repository_factory(self.root)

    # =========================================================================
    # Discovery
    # =========================================================================

    def detect_framework(self) -> TestFramework:
        return detect_framework(self.snapshot())

    def discover_tests(
        self,
        framework: TestFramework | None = None,
        include_paths: list[str] | None = None,
        exclude_paths: list[str] | None = None,
    ) -> list[TestFile]:
        return discover_tests(
            self.snapshot(),
            framework=framework,
            include_paths=include_paths,
            exclude_paths=exclude_paths,
            durations=self.history.latest_durations_by_file(),
        )

    def analyze_test_file(
        self,
        test_file: str,
        framework: TestFramework | None = None,
    ) -> list[TestCase]:
        cases = analyze_test_file(self.snapshot(), test_file, framework)
        return [self._with_history(case) for case in cases]

    def _with_history(self, case: TestCase) -> TestCase:
        """Attach recorded duration, flaky score and status to a case."""
        runs = self.history.snapshot(case.id)
        if not runs:
            if "skip" in case.tags:
                return dataclasses.replace(case, status="skip")
            return case

        score = transition_score(runs)
        if score > FLAKY_SCORE_THRESHOLD:
            status = "flaky"
        else:
            status = "pass" if runs[-1].passed else "fail"

        return dataclasses.replace(
            case,
            status=status,
            duration=runs[-1].duration,
            flaky_score=score,
        )

    def _load_suite(
        self,
        repository: Repository,
        framework: TestFramework | None = None,
    ) -> tuple[list[TestFile], dict[str, str | None], dict[str, list[TestCase]]]:
        """Discover test files, read them once, and extract their cases."""
        detected = framework or detect_framework(repository)
        contents = repository.read_many(find_test_paths(repository, detected))
        test_files = build_test_files(
            contents, detected, self.history.latest_durations_by_file()
        )

        cases_by_file = {}
        for test_file in test_files:
            content = contents.get(test_file.path)
            cases = extract_test_cases(test_file.path, content, detected) if content else []
            cases_by_file[test_file.path] = [self._with_history(c) for c in cases]

        return test_files, contents, cases_by_file

    # =========================================================================
    # Impact and selection
    # =========================================================================

    def get_impacted_tests(
        self,
        changed_files: list[str],
        depth: int = 2,
    ) -> list[ImpactedTest]:
        """
        Tests affected by ``changed_files``, highest impact first.

        ``depth`` is accepted for interface compatibility; scoring only looks
        at direct references, directories and top-level modules.
        """
        _, contents, cases_by_file = self._load_suite(self.snapshot())
        impacts = score_test_files(contents, changed_files)
        return impacted_tests(cases_by_file, impacts)

    def select_tests(
        self,
        changed_files: list[str],
        include_flaky: bool = False,
        max_tests: int | None = None,
        test_types: list[str] | None = None,
    ) -> TestSelection:
        _, contents, cases_by_file = self._load_suite(self.snapshot())
        impacts = score_test_files(contents, changed_files)
        return select_tests(
            cases_by_file,
            impacts,
            changed_files,
            include_flaky=include_flaky,
            max_tests=max_tests,
            test_types=test_types,
            quarantined=self.quarantine,
        )

    # =========================================================================
    # History and flakiness
    # =========================================================================

    def record_test_run(self, records: Iterable[RunRecord]) -> int:
        return self.history.record(records)

    def get_test_history(
        self,
        test_id: str | None = None,
        days: int = FLAKY_HISTORY_DAYS,
        now: datetime | None = None,
    ) -> dict[str, list[TestRunResult]]:
        """Runs within the last ``days`` days, per test id."""
        if test_id:
            return {test_id: within_window(self.history.snapshot(test_id), days, now)}

        result = {}
        for tracked_id, runs in self.history.snapshot_all().items():
            recent = within_window(runs, days, now)
            if recent:
                result[tracked_id] = recent
        return result

    def detect_flaky_tests(
        self,
        history_days: int = FLAKY_HISTORY_DAYS,
        min_runs: int = FLAKY_MIN_RUNS,
        flaky_threshold: float = FLAKY_PASS_RATE_THRESHOLD,
        now: datetime | None = None,
    ) -> list[FlakyTest]:
        flaky = detect_flaky_tests(
            self.history.snapshot_all(),
            history_days=history_days,
            min_runs=min_runs,
            flaky_threshold=flaky_threshold,
            now=now,
        )
        return [self._labelled(t) for t in flaky]

    def analyze_flaky_test(
        self,
        test_id: str,
        history_days: int = FLAKY_HISTORY_DAYS,
        now: datetime | None = None,
    ) -> FlakyTest | None:
        """Flakiness analysis of one test, flagged or not (None without history)."""
        runs = within_window(self.history.snapshot(test_id), history_days, now)
        if not runs:
            return None
        return self._labelled(analyze_runs(test_id, runs))

    def _labelled(self, flaky: FlakyTest) -> FlakyTest:
        """Prefer the name and file recorded with the runs over the parsed id."""
        name = self.history.name_of(flaky.test_id)
        file = self.history.file_of(flaky.test_id)
        return dataclasses.replace(
            flaky,
            test_name=name or flaky.test_name,
            file=file or flaky.file,
        )

    def quarantine_test(self, test_id: str, reason: str) -> bool:
        return self.quarantine.add(test_id, reason)

    def release_test(self, test_id: str) -> bool:
        return self.quarantine.release(test_id)

    def quarantined_tests(self) -> dict[str, str]:
        return self.quarantine.items()

    # =========================================================================
    # Coverage
    # =========================================================================

    def analyze_coverage(self, report_path: str | None = None) -> CoverageReport | None:
        """Parse the given or auto-located coverage report (None when absent/unparseable)."""
        repository = self.snapshot()
        path = report_path or repository.locate_coverage_report()
        if not path:
            return None

        content = repository.read_text(path)
        if content is None:
            return None

        report = parse_coverage_report(content)
        if report is None:
            logger.warning("Unrecognized coverage report: %s", path)
        return report

    def find_coverage_gaps(
        self,
        min_coverage: float = COVERAGE_RECOMMENDED,
        focus_files: list[str] | None = None,
        ignore_generated: bool = True,
        report_path: str | None = None,
    ) -> list[CoverageGap]:
        return find_coverage_gaps(
            self.analyze_coverage(report_path),
            min_coverage=min_coverage,
            focus_files=focus_files,
            ignore_generated=ignore_generated,
        )

    # =========================================================================
    # Health
    # =========================================================================

    def find_slow_tests(
        self,
        threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
        test_type: str | None = None,
    ) -> list[SlowTest]:
        cases = {}
        if test_type:
            _, _, cases_by_file = self._load_suite(self.snapshot())
            cases = {c.id: c for file_cases in cases_by_file.values() for c in file_cases}
        return find_slow_tests(
            self.history.snapshot_all(),
            threshold_ms=threshold_ms,
            cases=cases,
            test_type=test_type,
        )

    def find_duplicate_tests(self, similarity_threshold: float = 0.8) -> list[DuplicateTest]:
        _, _, cases_by_file = self._load_suite(self.snapshot())
        return find_duplicate_tests(cases_by_file, similarity_threshold)

    def get_test_health(self) -> TestSuiteHealth:
        """Fresh health snapshot from discovery, coverage and history."""
        repository = self.snapshot()
        test_files, _, cases_by_file = self._load_suite(repository)

        return score_health(
            total_tests=sum(f.test_count for f in test_files),
            coverage=self.analyze_coverage(),
            flaky_count=len(self.detect_flaky_tests()),
            slow_count=len(find_slow_tests(self.history.snapshot_all())),
            duplicate_count=len(find_duplicate_tests(cases_by_file)),
        )
