"""Plain text output for terminals."""

from typing import TextIO

from canopy.annotations import format_line_ranges
from canopy.coverage.models import AnalysisResult
from canopy.format.base import write_empty_result


class TextFormatter:
    """Uncovered lines grouped by file, with a one-line summary."""

    @property
    def format_id(self) -> str:
        return "text"

    def format(self, result: AnalysisResult, out: TextIO) -> None:
        if write_empty_result(result, out):
            return

        out.write("Uncovered lines in diff:\n\n")
        for path in result.sorted_files():
            out.write(f"{path}\n")
            out.write(f"  Lines: {format_line_ranges(result.uncovered_by_file[path])}\n\n")

        out.write(
            f"Summary: {result.total_uncovered} uncovered lines out of "
            f"{result.total_added} added lines ({result.coverage_percent:.1f}% coverage)\n"
        )
