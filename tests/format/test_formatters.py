"""Tests for report formatters."""

import io

import pytest

from canopy.annotations import Annotation
from canopy.core.errors import ConfigError
from canopy.coverage.models import AnalysisResult
from canopy.format import (
    ALL_COVERED,
    NO_LINES_ADDED,
    GitHubAnnotationsFormatter,
    MarkdownFormatter,
    TextFormatter,
    get_formatter,
    workflow_command,
)

RESULT = AnalysisResult(
    uncovered_by_file={"pkg/b.go": [20], "pkg/a.go": [7, 3, 4, 5]},
    total_added=10,
    total_uncovered=5,
)


def _render(formatter: object, result: AnalysisResult) -> str:
    out = io.StringIO()
    formatter.format(result, out)  # type: ignore[attr-defined]
    return out.getvalue()


class TestGetFormatter:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("text", TextFormatter),
            ("markdown", MarkdownFormatter),
            ("GitHub", GitHubAnnotationsFormatter),
        ],
    )
    def test_known_formats(self, name: str, expected: type) -> None:
        formatter = get_formatter(name)

        assert isinstance(formatter, expected)
        assert formatter.format_id == name.lower()

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ConfigError, match="unknown format"):
            get_formatter("html")

    def test_level_passed_to_github(self) -> None:
        formatter = get_formatter("github", level="warning")

        assert isinstance(formatter, GitHubAnnotationsFormatter)
        assert formatter.level == "warning"


class TestEmptyResults:
    @pytest.mark.parametrize("name", ["text", "markdown", "github"])
    def test_nothing_added(self, name: str) -> None:
        assert _render(get_formatter(name), AnalysisResult()) == f"{NO_LINES_ADDED}\n"

    @pytest.mark.parametrize("name", ["text", "markdown", "github"])
    def test_all_covered(self, name: str) -> None:
        result = AnalysisResult(total_added=4)

        assert _render(get_formatter(name), result) == f"{ALL_COVERED}\n"


class TestTextFormatter:
    def test_renders_files_and_summary(self) -> None:
        assert _render(TextFormatter(), RESULT) == (
            "Uncovered lines in diff:\n"
            "\n"
            "pkg/a.go\n"
            "  Lines: 3-5, 7\n"
            "\n"
            "pkg/b.go\n"
            "  Lines: 20\n"
            "\n"
            "Summary: 5 uncovered lines out of 10 added lines (50.0% coverage)\n"
        )


class TestMarkdownFormatter:
    def test_renders_table_and_summary(self) -> None:
        assert _render(MarkdownFormatter(), RESULT) == (
            "## Uncovered Lines in Diff\n"
            "\n"
            "| File | Lines |\n"
            "|------|-------|\n"
            "| pkg/a.go | 3-5, 7 |\n"
            "| pkg/b.go | 20 |\n"
            "\n"
            "**Summary:** 5 uncovered lines out of 10 added (50.0% coverage)\n"
        )

    def test_escapes_pipes_in_paths(self) -> None:
        result = AnalysisResult(uncovered_by_file={"a|b.go": [1]}, total_added=1, total_uncovered=1)

        assert "| a\\|b.go | 1 |" in _render(MarkdownFormatter(), result)


class TestGitHubAnnotationsFormatter:
    def test_one_command_per_range(self) -> None:
        assert _render(GitHubAnnotationsFormatter(), RESULT).splitlines() == [
            "::notice file=pkg/a.go,line=3,endLine=5,title=Uncovered lines"
            "::Lines 3-5 are not covered by tests",
            "::notice file=pkg/a.go,line=7,title=Uncovered line::Line 7 is not covered by tests",
            "::notice file=pkg/b.go,line=20,title=Uncovered line::Line 20 is not covered by tests",
        ]

    @pytest.mark.parametrize(
        ("level", "command"), [("notice", "notice"), ("warning", "warning"), ("failure", "error")]
    )
    def test_level_maps_to_workflow_command(self, level: str, command: str) -> None:
        output = _render(GitHubAnnotationsFormatter(level=level), RESULT)

        assert output.startswith(f"::{command} ")

    def test_escapes_property_values(self) -> None:
        annotation = Annotation(
            path="dir,with:odd.go",
            start_line=1,
            end_line=1,
            level="notice",
            title="Uncovered line",
            message="100% uncovered",
        )

        assert workflow_command(annotation) == (
            "::notice file=dir%2Cwith%3Aodd.go,line=1,title=Uncovered line::100%25 uncovered"
        )
