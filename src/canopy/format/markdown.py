"""Markdown output for pull request comments and job summaries."""

from typing import TextIO

from canopy.annotations import format_line_ranges
from canopy.coverage.models import AnalysisResult
from canopy.format.base import write_empty_result


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


class MarkdownFormatter:
    """A File | Lines table followed by a bold summary line."""

    @property
    def format_id(self) -> str:
        return "markdown"

    def format(self, result: AnalysisResult, out: TextIO) -> None:
        if write_empty_result(result, out):
            return

        out.write("## Uncovered Lines in Diff\n\n")
        out.write("| File | Lines |\n")
        out.write("|------|-------|\n")
        for path in result.sorted_files():
            lines = format_line_ranges(result.uncovered_by_file[path])
            out.write(f"| {_escape_cell(path)} | {lines} |\n")

        out.write("\n")
        out.write(
            f"**Summary:** {result.total_uncovered} uncovered lines out of "
            f"{result.total_added} added ({result.coverage_percent:.1f}% coverage)\n"
        )
