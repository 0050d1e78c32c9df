"""Tests for cross-referencing coverage with diff additions."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from canopy.coverage.analysis import (
    analyze_coverage,
    calculate_coverage_stats,
    compare_coverage,
    find_matching_diff_file,
)
from canopy.coverage.models import AnalysisResult, Profile, ProfileBlock

BlockFactory = Callable[..., ProfileBlock]
ProfileFactory = Callable[..., Profile]


class TestFindMatchingDiffFile:
    """Tests for path matching between coverage and diff."""

    def test_exact_match(self, profile: ProfileFactory) -> None:
        added = {"pkg/a.go": [1], "a.go": [2]}

        assert find_matching_diff_file(profile("pkg/a.go"), added) == ("pkg/a.go", [1])

    def test_module_path_suffix_match(self, profile: ProfileFactory) -> None:
        added = {"pkg/handler.go": [3]}

        match = find_matching_diff_file(profile("github.com/org/repo/pkg/handler.go"), added)

        assert match == ("pkg/handler.go", [3])

    def test_suffix_must_start_at_path_boundary(self, profile: ProfileFactory) -> None:
        added = {"handler.go": [3]}

        assert find_matching_diff_file(profile("github.com/org/repo/myhandler.go"), added) is None

    def test_longest_suffix_wins(self, profile: ProfileFactory) -> None:
        added = {"main.go": [1], "cmd/main.go": [2]}

        match = find_matching_diff_file(profile("github.com/org/repo/cmd/main.go"), added)

        assert match == ("cmd/main.go", [2])

    def test_miss_returns_none(self, profile: ProfileFactory) -> None:
        assert find_matching_diff_file(profile("github.com/org/repo/x.go"), {"y.go": [1]}) is None


class TestAnalyzeCoverage:
    """Tests for analyze_coverage."""

    def test_counts_only_instrumented_lines(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        profiles = [profile("repo/main.go", block(1, 5, 1), block(6, 10, 0))]

        result = analyze_coverage(profiles, {"main.go": [3, 7, 9]})

        assert result.total_added == 3
        assert result.total_uncovered == 2
        assert result.uncovered_by_file == {"main.go": [7, 9]}

    def test_lines_outside_blocks_are_ignored(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        profiles = [profile("repo/main.go", block(5, 8, 0))]

        result = analyze_coverage(profiles, {"main.go": [1, 2, 6, 20]})

        assert result.total_added == 1
        assert result.uncovered_by_file == {"main.go": [6]}

    def test_line_covered_by_any_overlapping_block(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        profiles = [profile("m/a.go", block(1, 10, 0), block(4, 6, 3))]

        result = analyze_coverage(profiles, {"a.go": [2, 5]})

        assert result.uncovered_by_file == {"a.go": [2]}

    def test_files_without_coverage_are_skipped(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        profiles = [profile("m/a.go", block(1, 3, 0))]

        result = analyze_coverage(profiles, {"a.go": [1], "b.go": [1, 2, 3]})

        assert result.total_added == 1
        assert "b.go" not in result.uncovered_by_file

    def test_fully_covered_file_is_absent_from_result(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        profiles = [profile("m/a.go", block(1, 3, 1))]

        result = analyze_coverage(profiles, {"a.go": [1, 2]})

        assert result.uncovered_by_file == {}
        assert result.total_added == 2
        assert not result.has_uncovered_lines

    def test_diff_file_counted_once_when_two_profiles_match(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        profiles = [
            profile("example.com/a/main.go", block(1, 3, 0)),
            profile("example.com/b/main.go", block(1, 3, 0)),
        ]

        result = analyze_coverage(profiles, {"main.go": [1, 2]})

        assert result.total_added == 2
        assert result.total_uncovered == 2

    def test_keeps_line_order_from_diff(self, profile: ProfileFactory, block: BlockFactory) -> None:
        profiles = [profile("m/a.go", block(1, 20, 0))]

        result = analyze_coverage(profiles, {"a.go": [9, 2, 5]})

        assert result.uncovered_by_file["a.go"] == [9, 2, 5]

    def test_empty_inputs(self) -> None:
        result = analyze_coverage([], {})

        assert result == AnalysisResult()
        assert result.coverage_percent == 0.0

    def test_totals_stay_consistent(self, profile: ProfileFactory, block: BlockFactory) -> None:
        profiles = [
            profile("m/a.go", block(1, 4, 0), block(5, 9, 2)),
            profile("m/b.go", block(10, 12, 0)),
        ]

        result = analyze_coverage(profiles, {"a.go": [1, 2, 6, 30], "b.go": [11, 12]})

        assert result.total_uncovered == sum(len(v) for v in result.uncovered_by_file.values())
        assert result.total_uncovered <= result.total_added
        assert result.total_covered == 1
        assert result.coverage_percent == pytest.approx(100 / 5)


class TestCoverageStats:
    def test_statement_coverage(self, profile: ProfileFactory, block: BlockFactory) -> None:
        profiles = [
            profile("a.go", block(1, 2, 1, stmts=3), block(3, 4, 0, stmts=1)),
            profile("b.go", block(1, 2, 0, stmts=4)),
        ]

        stats = calculate_coverage_stats(profiles)

        assert stats.total_statements == 8
        assert stats.covered_statements == 3
        assert stats.percentage == pytest.approx(37.5)
        assert stats.by_file["a.go"].percentage == pytest.approx(75.0)
        assert stats.by_file["b.go"].percentage == 0.0

    def test_no_profiles(self) -> None:
        stats = calculate_coverage_stats([])

        assert stats.total_statements == 0
        assert stats.percentage == 0.0


class TestCompareCoverage:
    def test_decrease(self, profile: ProfileFactory, block: BlockFactory) -> None:
        base = calculate_coverage_stats([profile("a.go", block(1, 2, 1, stmts=2))])
        head = calculate_coverage_stats(
            [profile("a.go", block(1, 2, 1, stmts=2), block(3, 4, 0, stmts=2))]
        )

        comparison = compare_coverage(base, head)

        assert comparison.base_coverage == 100.0
        assert comparison.head_coverage == 50.0
        assert comparison.delta == -50.0
        assert comparison.decreased

    def test_missing_side_counts_as_zero(
        self, profile: ProfileFactory, block: BlockFactory
    ) -> None:
        head = calculate_coverage_stats([profile("a.go", block(1, 2, 1))])

        comparison = compare_coverage(None, head)

        assert comparison.base_coverage == 0.0
        assert comparison.delta == 100.0
        assert not comparison.decreased
