"""Group uncovered lines into ranges and turn them into review annotations.

One annotation covers one run of consecutive uncovered lines in one file,
so a ten-line uncovered function produces a single annotation, not ten.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from canopy.coverage.models import AnalysisResult

DEFAULT_LEVEL = "notice"


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive range of line numbers."""

    start: int
    end: int

    @property
    def is_single_line(self) -> bool:
        return self.start == self.end

    def __str__(self) -> str:
        if self.is_single_line:
            return str(self.start)
        return f"{self.start}-{self.end}"


@dataclass(frozen=True, slots=True)
class Annotation:
    """A renderable note on a contiguous range of uncovered lines."""

    path: str
    start_line: int
    end_line: int
    level: str
    title: str
    message: str


def group_into_ranges(lines: Sequence[int]) -> list[LineRange]:
    """Group consecutive line numbers into ranges.

    Lines must already be sorted ascending. [5, 6, 7, 10] -> 5-7, 10.
    """
    if not lines:
        return []

    ranges: list[LineRange] = []
    range_start = range_end = lines[0]
    for line in lines[1:]:
        if line == range_end + 1:
            range_end = line
        else:
            ranges.append(LineRange(range_start, range_end))
            range_start = range_end = line
    ranges.append(LineRange(range_start, range_end))
    return ranges


def sort_and_group_lines(lines: Iterable[int]) -> list[LineRange]:
    """Sort a copy of the lines, then group them. The input is not modified."""
    return group_into_ranges(sorted(lines))


def format_line_ranges(lines: Iterable[int]) -> str:
    """Human-readable line list, e.g. "1, 3-5, 7"."""
    return ", ".join(str(r) for r in sort_and_group_lines(lines))


def annotation_for_range(
    path: str, line_range: LineRange, level: str = DEFAULT_LEVEL
) -> Annotation:
    if line_range.is_single_line:
        title = "Uncovered line"
        message = f"Line {line_range.start} is not covered by tests"
    else:
        title = "Uncovered lines"
        message = f"Lines {line_range.start}-{line_range.end} are not covered by tests"
    return Annotation(
        path=path,
        start_line=line_range.start,
        end_line=line_range.end,
        level=level,
        title=title,
        message=message,
    )


def build_annotations(
    result: AnalysisResult | None, level: str = DEFAULT_LEVEL
) -> list[Annotation]:
    """Convert an analysis result into annotations, files in sorted order."""
    if result is None or not result.uncovered_by_file:
        return []

    return [
        annotation_for_range(path, line_range, level)
        for path in result.sorted_files()
        for line_range in sort_and_group_lines(result.uncovered_by_file[path])
    ]
