"""Unified diff parsing and diff sources.

Usage:
    from canopy.diff import added_lines_by_file, parse_diff, select_diff_source

    data = select_diff_source(base="origin/main").get_diff()
    added = added_lines_by_file(parse_diff(data), extensions=[".go"])
"""

from canopy.diff.parser import (
    DEFAULT_SOURCE_EXTENSIONS,
    FileDiff,
    added_lines_by_file,
    normalize_filename,
    parse_diff,
    total_added_lines,
    unquote_path,
)
from canopy.diff.sources import (
    BytesDiffSource,
    CommitDiffSource,
    DiffSource,
    RefRangeDiffSource,
    WorkingTreeDiffSource,
    select_diff_source,
)

__all__ = [
    # Parser
    "DEFAULT_SOURCE_EXTENSIONS",
    "FileDiff",
    "added_lines_by_file",
    "normalize_filename",
    "parse_diff",
    "total_added_lines",
    "unquote_path",
    # Sources
    "BytesDiffSource",
    "CommitDiffSource",
    "DiffSource",
    "RefRangeDiffSource",
    "WorkingTreeDiffSource",
    "select_diff_source",
]
