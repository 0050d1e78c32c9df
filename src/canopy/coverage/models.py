"""Coverage profile data model.

Block-centric model matching the Go cover profile: each block is a source
span with a statement count and an execution count. Lines are 1-based.
"""

from __future__ import annotations

from dataclasses import dataclass, field

MODE_SET = "set"
MODE_COUNT = "count"
MODE_ATOMIC = "atomic"

BlockKey = tuple[int, int, int, int, int]


@dataclass(frozen=True, slots=True)
class ProfileBlock:
    """A contiguous source span and how often it ran."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def key(self) -> BlockKey:
        """Merge identity: position plus statement count, never the count."""
        return (self.start_line, self.start_col, self.end_line, self.end_col, self.num_stmt)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.start_line, self.start_col)

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True, slots=True)
class Profile:
    """Coverage for one file as recorded by the coverage tool.

    file_name is the fully-qualified module path
    (e.g. github.com/org/repo/pkg/file.go), not a repo-relative path.
    """

    file_name: str
    mode: str
    blocks: tuple[ProfileBlock, ...] = ()

    def is_instrumented(self, line: int) -> bool:
        """True if the line falls inside any block, whatever its count."""
        return any(block.contains_line(line) for block in self.blocks)

    def is_covered(self, line: int) -> bool:
        """True if the line falls inside a block that executed at least once."""
        return any(block.contains_line(line) and block.count > 0 for block in self.blocks)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Uncovered added lines, grouped by diff-relative path."""

    uncovered_by_file: dict[str, list[int]] = field(default_factory=dict)
    total_added: int = 0
    total_uncovered: int = 0

    @property
    def has_uncovered_lines(self) -> bool:
        return self.total_uncovered > 0

    @property
    def total_covered(self) -> int:
        return self.total_added - self.total_uncovered

    @property
    def coverage_percent(self) -> float:
        """Percentage of instrumented added lines that are covered."""
        if self.total_added == 0:
            return 0.0
        return self.total_covered / self.total_added * 100

    def sorted_files(self) -> list[str]:
        """Files with uncovered lines, in stable alphabetical order."""
        return sorted(self.uncovered_by_file)


@dataclass(frozen=True, slots=True)
class FileStats:
    """Statement coverage for a single profile."""

    file_name: str
    total_statements: int = 0
    covered_statements: int = 0

    @property
    def percentage(self) -> float:
        if self.total_statements == 0:
            return 0.0
        return self.covered_statements / self.total_statements * 100


@dataclass(frozen=True, slots=True)
class CoverageStats:
    """Statement coverage across a set of profiles."""

    total_statements: int = 0
    covered_statements: int = 0
    by_file: dict[str, FileStats] = field(default_factory=dict)

    @property
    def percentage(self) -> float:
        if self.total_statements == 0:
            return 0.0
        return self.covered_statements / self.total_statements * 100


@dataclass(frozen=True, slots=True)
class CoverageComparison:
    """Base vs head statement coverage. Positive delta means improvement."""

    base_coverage: float
    head_coverage: float

    @property
    def delta(self) -> float:
        return self.head_coverage - self.base_coverage

    @property
    def decreased(self) -> bool:
        return self.delta < 0
