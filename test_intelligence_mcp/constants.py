"""
Shared constants used across the project.
"""

from typing import Final

# Frameworks and test types
FRAMEWORKS: Final[tuple[str, ...]] = (
    "jest", "mocha", "vitest", "pytest", "go-test", "junit"
)
DEFAULT_FRAMEWORK: Final[str] = "jest"
TEST_TYPES: Final[tuple[str, ...]] = (
    "unit", "integration", "e2e", "performance", "snapshot"
)

# Flakiness
FLAKY_PASS_RATE_THRESHOLD: Final[float] = 0.95  # Below this = potentially flaky
FLAKY_MIN_RUNS: Final[int] = 5
FLAKY_SCORE_THRESHOLD: Final[float] = 20.0  # Above this = excluded from selection
FLAKY_HISTORY_DAYS: Final[int] = 30
RECENT_RUNS_LIMIT: Final[int] = 10
HISTORY_CAPACITY: Final[int] = 100

# Coverage
COVERAGE_MINIMUM: Final[float] = 60.0
COVERAGE_RECOMMENDED: Final[float] = 80.0
COVERAGE_EXCELLENT: Final[float] = 90.0
CRITICAL_PATH_COVERAGE: Final[float] = 50.0

COVERAGE_REPORT_PATHS: Final[tuple[str, ...]] = (
    "coverage/coverage-final.json",
    "coverage/lcov.info",
    "lcov.info",
    "coverage.json",
    "coverage/coverage.json",
)

GENERATED_FILE_MARKERS: Final[tuple[str, ...]] = (
    ".generated.", "/generated/", "__generated__", ".min.js", "_pb2.py"
)

# Slow tests (milliseconds)
SLOW_TEST_THRESHOLD_MS: Final[dict[str, int]] = {
    "unit": 100,
    "integration": 1000,
    "e2e": 10000,
    "performance": 30000,
    "snapshot": 500,
}
DEFAULT_SLOW_THRESHOLD_MS: Final[int] = 1000
SLOW_TEST_RATIO: Final[float] = 0.1

# Impact scoring
IMPACT_FILENAME_WEIGHT: Final[int] = 50
IMPACT_DIRECTORY_WEIGHT: Final[int] = 20
IMPACT_MODULE_WEIGHT: Final[int] = 10
IMPACT_MAX_SCORE: Final[int] = 100
MUST_RUN_SCORE: Final[int] = 70
SHOULD_RUN_SCORE: Final[int] = 30

# Health scoring. The baseline credit is a tunable floor, not a derived value.
HEALTH_COVERAGE_WEIGHT: Final[float] = 0.5
HEALTH_FLAKY_WEIGHT: Final[float] = 0.3
HEALTH_BASELINE_CREDIT: Final[int] = 20
FLAKY_PENALTY_PER_TEST: Final[int] = 10

# Repository walking
MAX_ENUMERATED_FILES: Final[int] = 10_000
MAX_TEST_FILES: Final[int] = 500
FILE_READ_WORKERS: Final[int] = 8
MAX_FILE_SIZE: Final[int] = 1_000_000  # 1MB

EXCLUDED_DIRECTORIES: Final[frozenset[str]] = frozenset({
    "node_modules", "dist", "build", "out", "target", "coverage",
    ".git", ".hg", ".svn", "__pycache__", ".pytest_cache", ".mypy_cache",
    ".tox", ".venv", "venv", "vendor", ".next",
})

# Logging
LOG_LEVEL_ENV_VAR: Final[str] = "TEST_INTELLIGENCE_LOG_LEVEL"
