"""
Tests for impact scoring and test selection.
"""

import pytest

from test_intelligence_mcp.core.discovery import TestCase
from test_intelligence_mcp.core.impact import (
    FileImpact,
    estimate_duration,
    exclusion_reason,
    impacted_tests,
    normalize_path,
    score_test_file,
    score_test_files,
    select_tests,
    selection_confidence,
)


def make_case(file, line, name, **kwargs):
    return TestCase(
        id=TestCase.make_id(file, line, name),
        name=name,
        file=file,
        line=line,
        **kwargs
    )


def make_suite():
    """Two must-run tests in a.test.ts and three should-run tests in b.test.ts."""
    cases_by_file = {
        "src/a.test.ts": [
            make_case("src/a.test.ts", 1, "first"),
            make_case("src/a.test.ts", 5, "second"),
        ],
        "src/b.test.ts": [
            make_case("src/b.test.ts", 1, "third"),
            make_case("src/b.test.ts", 5, "fourth"),
            make_case("src/b.test.ts", 9, "fifth"),
        ],
    }
    impacts = {
        "src/a.test.ts": FileImpact("src/a.test.ts", 80, ["src/a.ts"], "references a"),
        "src/b.test.ts": FileImpact("src/b.test.ts", 50, ["src/a.ts"], "references a"),
    }
    return cases_by_file, impacts


def all_ids(selection):
    tiers = [selection.must_run, selection.should_run, selection.can_skip, selection.truncated]
    return [case.id for tier in tiers for case in tier]


# =============================================================================
# Scoring Tests
# =============================================================================

class TestScoreTestFile:
    """Tests for per-file impact scoring."""

    def test_same_name_directory_and_module(self):
        """Name reference, same directory and same module add up to 80."""
        impact = score_test_file(
            "src/user.test.ts",
            'import { createUser } from "./user";',
            ["src/user.ts"],
        )

        assert impact.score == 80
        assert impact.changed_files == ["src/user.ts"]
        assert "references user" in impact.reason

    def test_score_is_capped(self):
        """Multiple changed files accumulate but never exceed 100."""
        impact = score_test_file(
            "src/user.test.ts",
            "user account",
            ["src/user.ts", "src/account.ts"],
        )
        assert impact.score == 100

    def test_module_only(self):
        """A shared top-level segment alone is worth 10."""
        impact = score_test_file("src/api/orders.test.ts", "orders", ["src/user.ts"])

        assert impact.score == 10
        assert impact.changed_files == []
        assert impact.reason == "same module 'src'"

    def test_unrelated_is_zero(self):
        """Nothing in common scores zero."""
        impact = score_test_file("lib/other.test.ts", "nothing here", ["src/user.ts"])
        assert impact.score == 0

    def test_unreadable_content_still_scores_location(self):
        """A file that could not be read keeps its directory signals."""
        impact = score_test_file("src/user.test.ts", None, ["src/user.ts"])
        assert impact.score == 30

    def test_paths_are_normalized(self):
        """Leading ./ and backslashes do not hide a match."""
        assert normalize_path("./src\\user.ts") == "src/user.ts"
        impacts = score_test_files({"src/user.test.ts": "user"}, ["./src/user.ts"])
        assert impacts["src/user.test.ts"].score == 80


class TestImpactedTests:
    """Tests for impacted_tests."""

    def test_zero_score_files_are_left_out(self):
        """Only files with a positive score contribute tests."""
        cases_by_file, impacts = make_suite()
        impacts["src/b.test.ts"] = FileImpact("src/b.test.ts", 0)

        impacted = impacted_tests(cases_by_file, impacts)
        assert [t.test_name for t in impacted] == ["first", "second"]

    def test_highest_score_first(self):
        """Results are ordered by impact score, descending."""
        cases_by_file, impacts = make_suite()
        impacted = impacted_tests(cases_by_file, impacts)

        scores = [t.impact_score for t in impacted]
        assert scores == sorted(scores, reverse=True)
        assert impacted[0].changed_files == ["src/a.ts"]


# =============================================================================
# Selection Tests
# =============================================================================

class TestSelectTests:
    """Tests for select_tests."""

    def test_tiers_by_score(self):
        """Score > 70 is must-run, > 30 should-run, the rest can be skipped."""
        cases_by_file, impacts = make_suite()
        cases_by_file["lib/c.test.ts"] = [make_case("lib/c.test.ts", 1, "sixth")]

        selection = select_tests(cases_by_file, impacts, ["src/a.ts"])

        assert [c.name for c in selection.must_run] == ["first", "second"]
        assert [c.name for c in selection.should_run] == ["third", "fourth", "fifth"]
        assert [c.name for c in selection.can_skip] == ["sixth"]
        assert selection.total_saved == 1

    def test_partition_has_no_duplicates_or_omissions(self):
        """Every discovered test lands in exactly one tier."""
        cases_by_file, impacts = make_suite()
        cases_by_file["lib/c.test.ts"] = [make_case("lib/c.test.ts", 1, "sixth")]
        expected = sorted(c.id for cases in cases_by_file.values() for c in cases)

        for max_tests in (None, 1, 3, 10):
            selection = select_tests(cases_by_file, impacts, ["src/a.ts"], max_tests=max_tests)
            ids = all_ids(selection)
            assert sorted(ids) == expected
            assert len(ids) == len(set(ids))

    def test_max_tests_keeps_first_must_run(self):
        """maxTests=1 keeps the first must-run test; the other four are saved."""
        cases_by_file, impacts = make_suite()

        selection = select_tests(cases_by_file, impacts, ["src/a.ts"], max_tests=1)

        assert [c.name for c in selection.selected] == ["first"]
        assert selection.should_run == []
        assert len(selection.truncated) == 4
        assert selection.total_saved == 4

    def test_max_tests_fills_from_should_run(self):
        """Leftover capacity after must-run is filled from should-run in order."""
        cases_by_file, impacts = make_suite()

        selection = select_tests(cases_by_file, impacts, ["src/a.ts"], max_tests=3)

        assert [c.name for c in selection.must_run] == ["first", "second"]
        assert [c.name for c in selection.should_run] == ["third"]
        assert [c.name for c in selection.truncated] == ["fourth", "fifth"]

    def test_flaky_tests_are_excluded_unless_requested(self):
        """A flaky score above 20 forces can-skip unless include_flaky is set."""
        cases_by_file, impacts = make_suite()
        flaky = make_case("src/a.test.ts", 1, "first", flaky_score=50.0)
        cases_by_file["src/a.test.ts"][0] = flaky

        excluded = select_tests(cases_by_file, impacts, ["src/a.ts"])
        assert flaky in excluded.can_skip
        assert excluded.exclusions[flaky.id] == "flaky"

        included = select_tests(cases_by_file, impacts, ["src/a.ts"], include_flaky=True)
        assert flaky in included.must_run

    def test_quarantined_tests_are_excluded(self):
        """Quarantine wins over a must-run score."""
        cases_by_file, impacts = make_suite()
        target = cases_by_file["src/a.test.ts"][1]

        selection = select_tests(
            cases_by_file, impacts, ["src/a.ts"], quarantined={target.id}
        )

        assert target in selection.can_skip
        assert selection.exclusions[target.id] == "quarantined"

    def test_type_filter(self):
        """Tests of other types are skipped with reason 'type'."""
        cases_by_file, impacts = make_suite()

        selection = select_tests(cases_by_file, impacts, ["src/a.ts"], test_types=["e2e"])

        assert selection.selected == []
        assert set(selection.exclusions.values()) == {"type"}

    def test_estimated_duration_uses_recorded_or_half_threshold(self):
        """Known durations are used; unit tests default to 50ms."""
        tests = [
            make_case("a.test.ts", 1, "known", duration=120.0),
            make_case("a.test.ts", 2, "unknown"),
        ]
        assert estimate_duration(tests) == pytest.approx(170.0)


class TestSelectionConfidence:
    """Tests for selection_confidence."""

    def test_no_changes_is_full_confidence(self):
        assert selection_confidence([], []) == 100.0

    def test_fraction_of_changed_files_matched(self):
        """Half the changed files matched by a selected test gives 75."""
        selected = [make_case("src/user.test.ts", 1, "creates")]
        assert selection_confidence(["src/user.ts", "src/zzz.ts"], selected) == 75.0
        assert selection_confidence(["src/user.ts"], selected) == 100.0

    def test_nothing_selected(self):
        """No selected tests leaves the base confidence."""
        assert selection_confidence(["src/user.ts"], []) == 50.0


class TestExclusionReason:
    """Tests for exclusion_reason precedence."""

    def test_type_before_flaky(self):
        case = make_case("a.test.ts", 1, "x", flaky_score=90.0)
        assert exclusion_reason(case, False, ["e2e"], frozenset()) == "type"

    def test_not_excluded(self):
        case = make_case("a.test.ts", 1, "x", flaky_score=10.0)
        assert exclusion_reason(case, False, None, frozenset()) is None
