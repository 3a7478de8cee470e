"""Line-level test case extraction, type classification and tag extraction.

Matching is textual, not a parse: a case is a call-like construct (or the
framework's declaration form) whose first argument or name is a literal
naming the case. Framework call-site conventions are the contract.
"""

from __future__ import annotations

import re
from fnmatch import fnmatch

from .models import TestCase, TestFramework, TestType

TEST_FILE_PATTERNS: dict[str, tuple[str, ...]] = {
    "jest": (
        "*.test.ts", "*.test.tsx", "*.test.js", "*.test.jsx",
        "*.spec.ts", "*.spec.tsx", "*.spec.js", "*.spec.jsx",
    ),
    "vitest": (
        "*.test.ts", "*.test.tsx", "*.test.js", "*.test.jsx",
        "*.spec.ts", "*.spec.tsx", "*.spec.js", "*.spec.jsx",
    ),
    "mocha": ("*.test.js", "*.spec.js"),
    "pytest": ("test_*.py", "*_test.py"),
    "go-test": ("*_test.go",),
    "junit": ("*Test.java", "*Tests.java"),
}

_JS_COUNT = re.compile(r"\b(?:it|test)(?:\.\w+)?\s*\(")
_JS_CASE = re.compile(r"\b(?:it|test)(?:\.(?:only|skip|concurrent|todo))?\s*\(\s*(['\"`])(.+?)\1")

COUNT_PATTERNS: dict[str, re.Pattern] = {
    "jest": _JS_COUNT,
    "vitest": _JS_COUNT,
    "mocha": _JS_COUNT,
    "pytest": re.compile(r"\bdef\s+test_"),
    "go-test": re.compile(r"\bfunc\s+Test"),
    "junit": re.compile(r"@Test\b"),
}

CASE_PATTERNS: dict[str, re.Pattern] = {
    "jest": _JS_CASE,
    "vitest": _JS_CASE,
    "mocha": _JS_CASE,
    "pytest": re.compile(r"^\s*(?:async\s+)?def\s+(test_\w+)"),
    "go-test": re.compile(r"^\s*func\s+(Test\w+)\s*\("),
    "junit": re.compile(r"\bvoid\s+(\w+)\s*\("),
}

# Precedence: e2e > integration > performance > snapshot > unit
E2E_PATH_TOKENS = ("e2e", "playwright", "cypress")
INTEGRATION_TOKENS = ("integration",)
PERFORMANCE_PATH_TOKENS = ("performance", "benchmark")
SNAPSHOT_NAME_TOKENS = ("snapshot",)

# Marker tokens in the order they are reported
TAG_TOKENS = ("slow", "flaky", "skip", "integration", "e2e")
_TAG_PATTERN = re.compile(r"@(?:pytest\.mark\.)?(slow|flaky|skip|integration|e2e)\b")

TAG_CONTEXT_LINES = 5


def is_test_file(path: str, framework: TestFramework) -> bool:
    """Check a path's base name against the framework's test file patterns."""
    name = path.rsplit("/", 1)[-1]
    return any(fnmatch(name, pattern) for pattern in TEST_FILE_PATTERNS[framework])


def count_tests(content: str, framework: TestFramework) -> int:
    return len(COUNT_PATTERNS[framework].findall(content))


def extract_test_cases(
    file: str,
    content: str,
    framework: TestFramework
) -> list[TestCase]:
    """Find every test case declared in ``content``, in line order."""
    pattern = CASE_PATTERNS[framework]
    lines = content.split("\n")
    cases = []

    for index, line in enumerate(lines):
        match = pattern.search(line)
        if not match:
            continue

        preceding = lines[max(0, index - TAG_CONTEXT_LINES):index]

        # JUnit methods count only when annotated
        if framework == "junit" and not any("@Test" in p for p in preceding + [line]):
            continue

        name = match.group(match.lastindex)
        line_number = index + 1
        cases.append(TestCase(
            id=TestCase.make_id(file, line_number, name),
            name=name,
            file=file,
            line=line_number,
            type=infer_test_type(file, name),
            tags=extract_tags(line, preceding),
        ))

    return cases


def infer_test_type(file: str, test_name: str) -> TestType:
    """Classify a test by path and name keywords."""
    lower_file = file.lower()
    lower_name = test_name.lower()

    if any(token in lower_file for token in E2E_PATH_TOKENS):
        return "e2e"
    if any(token in lower_file or token in lower_name for token in INTEGRATION_TOKENS):
        return "integration"
    if any(token in lower_file for token in PERFORMANCE_PATH_TOKENS):
        return "performance"
    if any(token in lower_name for token in SNAPSHOT_NAME_TOKENS):
        return "snapshot"
    return "unit"


def extract_tags(line: str, previous_lines: list[str]) -> tuple[str, ...]:
    """Collect marker tags from the declaration line and the lines above it."""
    text = " ".join([*previous_lines, line])
    found = set(_TAG_PATTERN.findall(text))
    return tuple(tag for tag in TAG_TOKENS if tag in found)
