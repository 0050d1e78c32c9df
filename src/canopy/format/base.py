"""Formatter protocol and shared helpers."""

from typing import Protocol, TextIO

from canopy.coverage.models import AnalysisResult

NO_LINES_ADDED = "No lines added in diff"
ALL_COVERED = "All added lines are covered!"


class Formatter(Protocol):
    """Renders an analysis result to a text stream."""

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'text', 'markdown')."""
        ...

    def format(self, result: AnalysisResult, out: TextIO) -> None:
        """Write the rendered result to out."""
        ...


def write_empty_result(result: AnalysisResult, out: TextIO) -> bool:
    """Write the one-line message for a result with nothing uncovered.

    Returns:
        True if the result was fully handled, False if the caller should
        render the uncovered lines.
    """
    if result.has_uncovered_lines:
        return False
    if result.total_added == 0:
        out.write(f"{NO_LINES_ADDED}\n")
    else:
        out.write(f"{ALL_COVERED}\n")
    return True
