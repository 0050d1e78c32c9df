"""Go coverage profile parsing, merging, and diff analysis.

This package provides:
- Profile parsing (plain text or zip archives of profiles) and serialization
- Block-level merge across test runs
- Cross-referencing merged profiles with the lines a diff added

Usage:
    from canopy.coverage import analyze_coverage, merge_profiles, parse_profiles

    profiles = parse_profiles(Path("coverage.out").read_bytes())
    merged = merge_profiles(profiles)
    result = analyze_coverage(merged, {"pkg/handler.go": [12, 13, 40]})
"""

from canopy.coverage.analysis import (
    analyze_coverage,
    calculate_coverage_stats,
    compare_coverage,
    find_matching_diff_file,
)
from canopy.coverage.merge import merge_count, merge_file_profiles, merge_profiles
from canopy.coverage.models import (
    MODE_ATOMIC,
    MODE_COUNT,
    MODE_SET,
    AnalysisResult,
    CoverageComparison,
    CoverageStats,
    FileStats,
    Profile,
    ProfileBlock,
)
from canopy.coverage.profile import (
    is_coverage_file,
    parse_profiles,
    parse_profiles_from_zip,
    serialize_profiles,
    validate_profile,
)

__all__ = [
    # Models
    "MODE_ATOMIC",
    "MODE_COUNT",
    "MODE_SET",
    "AnalysisResult",
    "CoverageComparison",
    "CoverageStats",
    "FileStats",
    "Profile",
    "ProfileBlock",
    # Parsing
    "is_coverage_file",
    "parse_profiles",
    "parse_profiles_from_zip",
    "serialize_profiles",
    "validate_profile",
    # Merge
    "merge_count",
    "merge_file_profiles",
    "merge_profiles",
    # Analysis
    "analyze_coverage",
    "calculate_coverage_stats",
    "compare_coverage",
    "find_matching_diff_file",
]
