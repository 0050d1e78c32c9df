"""GitHub Actions workflow-command output.

Each annotation becomes one line such as:

    ::notice file=pkg/a.go,line=12,endLine=14,title=Uncovered lines::Lines 12-14 are not ...

which the Actions runner attaches to the pull request diff.
"""

from typing import TextIO

from canopy.annotations import DEFAULT_LEVEL, Annotation, build_annotations
from canopy.coverage.models import AnalysisResult
from canopy.format.base import write_empty_result

# Check-run levels -> workflow command names
_COMMANDS = {
    "notice": "notice",
    "warning": "warning",
    "failure": "error",
}


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def workflow_command(annotation: Annotation) -> str:
    command = _COMMANDS.get(annotation.level, "notice")
    props = [f"file={_escape_property(annotation.path)}", f"line={annotation.start_line}"]
    if annotation.end_line != annotation.start_line:
        props.append(f"endLine={annotation.end_line}")
    props.append(f"title={_escape_property(annotation.title)}")
    return f"::{command} {','.join(props)}::{_escape_data(annotation.message)}"


class GitHubAnnotationsFormatter:
    """One workflow command per run of consecutive uncovered lines."""

    def __init__(self, level: str = DEFAULT_LEVEL) -> None:
        self.level = level

    @property
    def format_id(self) -> str:
        return "github"

    def format(self, result: AnalysisResult, out: TextIO) -> None:
        if write_empty_result(result, out):
            return
        for annotation in build_annotations(result, self.level):
            out.write(workflow_command(annotation))
            out.write("\n")
