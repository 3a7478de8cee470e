"""Registry for core MCP tool definitions and handlers."""

# Tool definitions and handlers
from .discover_tests import (
    TOOL_DEFINITION as DISCOVER_TESTS_TOOL,
    handle as handle_discover_tests,
)

from .analyze_test_file import (
    TOOL_DEFINITION as ANALYZE_TEST_FILE_TOOL,
    handle as handle_analyze_test_file,
)

from .get_impacted_tests import (
    TOOL_DEFINITION as GET_IMPACTED_TESTS_TOOL,
    handle as handle_get_impacted_tests,
)

from .select_tests import (
    TOOL_DEFINITION as SELECT_TESTS_TOOL,
    handle as handle_select_tests,
)

from .record_test_run import (
    TOOL_DEFINITION as RECORD_TEST_RUN_TOOL,
    handle as handle_record_test_run,
)

from .get_test_history import (
    TOOL_DEFINITION as GET_TEST_HISTORY_TOOL,
    handle as handle_get_test_history,
)

from .detect_flaky_tests import (
    TOOL_DEFINITION as DETECT_FLAKY_TESTS_TOOL,
    handle as handle_detect_flaky_tests,
)

from .analyze_flaky_test import (
    TOOL_DEFINITION as ANALYZE_FLAKY_TEST_TOOL,
    handle as handle_analyze_flaky_test,
)

from .quarantine_test import (
    TOOL_DEFINITION as QUARANTINE_TEST_TOOL,
    handle as handle_quarantine_test,
)

from .release_test import (
    TOOL_DEFINITION as RELEASE_TEST_TOOL,
    handle as handle_release_test,
)

from .list_quarantined import (
    TOOL_DEFINITION as LIST_QUARANTINED_TOOL,
    handle as handle_list_quarantined,
)

from .analyze_coverage import (
    TOOL_DEFINITION as ANALYZE_COVERAGE_TOOL,
    handle as handle_analyze_coverage,
)

from .find_coverage_gaps import (
    TOOL_DEFINITION as FIND_COVERAGE_GAPS_TOOL,
    handle as handle_find_coverage_gaps,
)

from .get_test_health import (
    TOOL_DEFINITION as GET_TEST_HEALTH_TOOL,
    handle as handle_get_test_health,
)

from .find_slow_tests import (
    TOOL_DEFINITION as FIND_SLOW_TESTS_TOOL,
    handle as handle_find_slow_tests,
)

from .find_duplicate_tests import (
    TOOL_DEFINITION as FIND_DUPLICATE_TESTS_TOOL,
    handle as handle_find_duplicate_tests,
)


# All Core tool definitions
TOOLS = [
    DISCOVER_TESTS_TOOL,
    ANALYZE_TEST_FILE_TOOL,
    GET_IMPACTED_TESTS_TOOL,
    SELECT_TESTS_TOOL,
    RECORD_TEST_RUN_TOOL,
    GET_TEST_HISTORY_TOOL,
    DETECT_FLAKY_TESTS_TOOL,
    ANALYZE_FLAKY_TEST_TOOL,
    QUARANTINE_TEST_TOOL,
    RELEASE_TEST_TOOL,
    LIST_QUARANTINED_TOOL,
    ANALYZE_COVERAGE_TOOL,
    FIND_COVERAGE_GAPS_TOOL,
    GET_TEST_HEALTH_TOOL,
    FIND_SLOW_TESTS_TOOL,
    FIND_DUPLICATE_TESTS_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "discover_tests": handle_discover_tests,
    "analyze_test_file": handle_analyze_test_file,
    "get_impacted_tests": handle_get_impacted_tests,
    "select_tests": handle_select_tests,
    "record_test_run": handle_record_test_run,
    "get_test_history": handle_get_test_history,
    "detect_flaky_tests": handle_detect_flaky_tests,
    "analyze_flaky_test": handle_analyze_flaky_test,
    "quarantine_test": handle_quarantine_test,
    "release_test": handle_release_test,
    "list_quarantined": handle_list_quarantined,
    "analyze_coverage": handle_analyze_coverage,
    "find_coverage_gaps": handle_find_coverage_gaps,
    "get_test_health": handle_get_test_health,
    "find_slow_tests": handle_find_slow_tests,
    "find_duplicate_tests": handle_find_duplicate_tests,
}


__all__ = [
    # Tool definitions
    "TOOLS",
    "DISCOVER_TESTS_TOOL",
    "ANALYZE_TEST_FILE_TOOL",
    "GET_IMPACTED_TESTS_TOOL",
    "SELECT_TESTS_TOOL",
    "RECORD_TEST_RUN_TOOL",
    "GET_TEST_HISTORY_TOOL",
    "DETECT_FLAKY_TESTS_TOOL",
    "ANALYZE_FLAKY_TEST_TOOL",
    "QUARANTINE_TEST_TOOL",
    "RELEASE_TEST_TOOL",
    "LIST_QUARANTINED_TOOL",
    "ANALYZE_COVERAGE_TOOL",
    "FIND_COVERAGE_GAPS_TOOL",
    "GET_TEST_HEALTH_TOOL",
    "FIND_SLOW_TESTS_TOOL",
    "FIND_DUPLICATE_TESTS_TOOL",
    # Handlers
    "HANDLERS",
    "handle_discover_tests",
    "handle_analyze_test_file",
    "handle_get_impacted_tests",
    "handle_select_tests",
    "handle_record_test_run",
    "handle_get_test_history",
    "handle_detect_flaky_tests",
    "handle_analyze_flaky_test",
    "handle_quarantine_test",
    "handle_release_test",
    "handle_list_quarantined",
    "handle_analyze_coverage",
    "handle_find_coverage_gaps",
    "handle_get_test_health",
    "handle_find_slow_tests",
    "handle_find_duplicate_tests",
]
