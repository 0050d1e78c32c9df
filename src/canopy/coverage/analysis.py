"""Cross-reference coverage profiles with a diff.

Coverage profiles are the primary source: only files that have a profile
are candidates, and only added lines that fall inside an instrumented
block are counted. Comments, blank lines and other non-statement lines
never show up as uncovered.
"""

from collections.abc import Mapping, Sequence

import structlog

from canopy.coverage.models import (
    AnalysisResult,
    CoverageComparison,
    CoverageStats,
    FileStats,
    Profile,
)

log = structlog.get_logger(__name__)


def find_matching_diff_file(
    profile: Profile,
    added_lines_by_file: Mapping[str, Sequence[int]],
) -> tuple[str, Sequence[int]] | None:
    """Find the diff entry that a coverage profile describes.

    Coverage records module paths (github.com/org/repo/pkg/file.go) while
    diffs record repo-relative paths (pkg/file.go). An exact match wins;
    otherwise the diff path must be a suffix starting at a "/" boundary,
    so handler.go never matches myhandler.go. The longest such path wins.

    Returns:
        (diff_path, added_lines), or None when the file is not in the diff.
    """
    profile_file = profile.file_name

    if profile_file in added_lines_by_file:
        return profile_file, added_lines_by_file[profile_file]

    candidates = [
        diff_file
        for diff_file in added_lines_by_file
        if diff_file and profile_file.endswith("/" + diff_file)
    ]
    if not candidates:
        return None

    best = max(candidates, key=len)
    return best, added_lines_by_file[best]


def analyze_coverage(
    profiles: Sequence[Profile],
    added_lines_by_file: Mapping[str, Sequence[int]],
) -> AnalysisResult:
    """Find added lines that no test executed.

    Args:
        profiles: Merged coverage profiles (see merge_profiles).
        added_lines_by_file: Diff path -> added line numbers, already
            filtered to source files (see added_lines_by_file).

    Returns:
        AnalysisResult keyed by diff path. Files with coverage but no diff
        entry are skipped and do not count toward the totals.
    """
    uncovered_by_file: dict[str, list[int]] = {}
    matched: set[str] = set()
    total_added = 0
    total_uncovered = 0

    for profile in profiles:
        match = find_matching_diff_file(profile, added_lines_by_file)
        if match is None:
            log.debug("profile_not_in_diff", file=profile.file_name)
            continue

        diff_file, added_lines = match
        if diff_file in matched:
            log.debug("diff_file_already_matched", file=profile.file_name, diff_file=diff_file)
            continue
        matched.add(diff_file)

        uncovered: list[int] = []
        for line in added_lines:
            if not profile.is_instrumented(line):
                continue
            total_added += 1
            if not profile.is_covered(line):
                uncovered.append(line)

        total_uncovered += len(uncovered)
        if uncovered:
            uncovered_by_file[diff_file] = uncovered

    return AnalysisResult(
        uncovered_by_file=uncovered_by_file,
        total_added=total_added,
        total_uncovered=total_uncovered,
    )


def calculate_coverage_stats(profiles: Sequence[Profile]) -> CoverageStats:
    """Compute statement coverage per file and overall.

    A block's statements count as covered when the block ran at least once.
    """
    by_file: dict[str, FileStats] = {}
    total = 0
    covered = 0

    for profile in profiles:
        file_total = sum(block.num_stmt for block in profile.blocks)
        file_covered = sum(block.num_stmt for block in profile.blocks if block.count > 0)
        by_file[profile.file_name] = FileStats(
            file_name=profile.file_name,
            total_statements=file_total,
            covered_statements=file_covered,
        )
        total += file_total
        covered += file_covered

    return CoverageStats(total_statements=total, covered_statements=covered, by_file=by_file)


def compare_coverage(
    base: CoverageStats | None,
    head: CoverageStats | None,
) -> CoverageComparison:
    """Compare base and head coverage. A missing side counts as 0%."""
    return CoverageComparison(
        base_coverage=base.percentage if base is not None else 0.0,
        head_coverage=head.percentage if head is not None else 0.0,
    )
