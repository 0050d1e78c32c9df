"""Output formatters for analysis results.

Usage:
    from canopy.format import get_formatter

    get_formatter("markdown").format(result, sys.stdout)

Supported formats:
    - text: plain text for terminals
    - markdown: table for PR comments and job summaries
    - github: GitHub Actions ::notice workflow commands
"""

from canopy.annotations import DEFAULT_LEVEL
from canopy.core.errors import ConfigError
from canopy.format.base import ALL_COVERED, NO_LINES_ADDED, Formatter
from canopy.format.github import GitHubAnnotationsFormatter, workflow_command
from canopy.format.markdown import MarkdownFormatter
from canopy.format.text import TextFormatter

FORMAT_IDS = ("text", "markdown", "github")

__all__ = [
    "ALL_COVERED",
    "FORMAT_IDS",
    "NO_LINES_ADDED",
    "Formatter",
    "GitHubAnnotationsFormatter",
    "MarkdownFormatter",
    "TextFormatter",
    "get_formatter",
    "workflow_command",
]


def get_formatter(format_id: str, *, level: str = DEFAULT_LEVEL) -> Formatter:
    """Create the formatter for a format id (case-insensitive).

    Raises:
        ConfigError: If the format is unknown.
    """
    key = format_id.lower()
    if key == "text":
        return TextFormatter()
    if key == "markdown":
        return MarkdownFormatter()
    if key == "github":
        return GitHubAnnotationsFormatter(level=level)
    raise ConfigError.invalid_value(
        "output.format", format_id, f"unknown format (supported: {', '.join(FORMAT_IDS)})"
    )
