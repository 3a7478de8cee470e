"""Impact - change impact scoring and tiered test selection."""

from .analyzer import impacted_tests, normalize_path, score_test_file, score_test_files
from .models import FileImpact, ImpactedTest, TestSelection
from .selector import estimate_duration, exclusion_reason, select_tests, selection_confidence

__all__ = [
    "score_test_file",
    "score_test_files",
    "impacted_tests",
    "normalize_path",
    "select_tests",
    "exclusion_reason",
    "estimate_duration",
    "selection_confidence",
    "FileImpact",
    "ImpactedTest",
    "TestSelection",
]
