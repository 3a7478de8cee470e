"""Score how strongly a change set affects each test file.

Per changed file, additive and capped at 100:
- the changed file's base name appears in the test content  +50
- the test sits in the changed file's directory             +20
- both share the same top-level path segment                +10
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePosixPath

from ...constants import (
    IMPACT_DIRECTORY_WEIGHT,
    IMPACT_FILENAME_WEIGHT,
    IMPACT_MAX_SCORE,
    IMPACT_MODULE_WEIGHT,
)
from ..discovery.models import TestCase
from .models import FileImpact, ImpactedTest


def normalize_path(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def base_name(path: str) -> str:
    """File name without its last extension (``src/user.ts`` -> ``user``)."""
    return PurePosixPath(path).stem


def score_test_file(
    test_path: str,
    content: str | None,
    changed_files: list[str]
) -> FileImpact:
    """Accumulate the impact of every changed file on one test file."""
    score = 0
    matched: list[str] = []
    signals: list[str] = []
    test_dir = PurePosixPath(test_path).parent
    test_module = test_path.split("/")[0]

    for changed in changed_files:
        name = base_name(changed)

        if name and content is not None and name in content:
            score += IMPACT_FILENAME_WEIGHT
            matched.append(changed)
            signals.append(f"references {name}")

        if PurePosixPath(changed).parent == test_dir:
            score += IMPACT_DIRECTORY_WEIGHT
            if changed not in matched:
                matched.append(changed)
            signals.append(f"same directory as {changed}")

        if changed.split("/")[0] == test_module:
            score += IMPACT_MODULE_WEIGHT

    if score and not signals:
        signals.append(f"same module '{test_module}'")

    return FileImpact(
        file=test_path,
        score=min(IMPACT_MAX_SCORE, score),
        changed_files=matched,
        reason="; ".join(signals),
    )


def score_test_files(
    contents: Mapping[str, str | None],
    changed_files: list[str]
) -> dict[str, FileImpact]:
    """Score every test file; the result is keyed by test file path."""
    changed = [normalize_path(f) for f in changed_files]
    return {
        path: score_test_file(path, content, changed)
        for path, content in sorted(contents.items())
    }


def impacted_tests(
    cases_by_file: Mapping[str, list[TestCase]],
    impacts: Mapping[str, FileImpact],
) -> list[ImpactedTest]:
    """
    Expand file impacts to their test cases.

    Files scoring zero are left out. Highest score first; equal scores keep
    path then line order.
    """
    impacted = []

    for path in sorted(cases_by_file):
        impact = impacts.get(path)
        if impact is None or impact.score <= 0:
            continue

        for case in cases_by_file[path]:
            impacted.append(ImpactedTest(
                test_id=case.id,
                test_name=case.name,
                file=path,
                impact_score=impact.score,
                reason=impact.reason,
                changed_files=list(impact.changed_files),
            ))

    return sorted(impacted, key=lambda t: -t.impact_score)
