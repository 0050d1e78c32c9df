"""Unified diff parsing.

Reads `git diff` style output and records, per file, which line numbers of
the new file were added. Only the new-file side is tracked: removed lines
never advance the counter, context and added lines do.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from canopy.core.errors import InputError

_QUOTED = r'"(?:[^"\\]|\\.)*"'
_DIFF_PREFIX = "diff --git "
_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.+) b/(.+)$")
_QUOTED_HEADER_RE = re.compile(rf"^diff --git ({_QUOTED}|a/.+?) ({_QUOTED}|b/.+)$")
_OLD_FILE_RE = re.compile(rf"^--- (a/.+|{_QUOTED})$")
_NEW_FILE_RE = re.compile(rf"^\+\+\+ (b/.+|{_QUOTED})$")
_OCTAL_RE = re.compile(r"[0-7]{3}")
# C-style escapes git uses in quoted paths (core.quotePath)
_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}
_HUNK_HEADER_RE = re.compile(r"^@@ -([0-9]+)(?:,([0-9]+))? \+([0-9]+)(?:,([0-9]+))? @@")
_BINARY_RE = re.compile(r"^Binary files .+ differ$")
_DELETED_RE = re.compile(r"^deleted file mode")
_RENAMED_RE = re.compile(r"^rename from (.+)$")

DEFAULT_SOURCE_EXTENSIONS = (".go",)


@dataclass(frozen=True, slots=True)
class FileDiff:
    """Changes to a single file in a diff."""

    old_name: str
    new_name: str
    added_lines: tuple[int, ...] = ()
    is_binary: bool = False
    is_renamed: bool = False
    is_deleted: bool = False


@dataclass(slots=True)
class _Section:
    """Mutable accumulator for the file section being scanned."""

    old_name: str
    new_name: str
    added_lines: list[int] = field(default_factory=list)
    is_binary: bool = False
    is_renamed: bool = False
    is_deleted: bool = False

    def freeze(self) -> FileDiff:
        return FileDiff(
            old_name=self.old_name,
            new_name=self.new_name,
            added_lines=tuple(self.added_lines),
            is_binary=self.is_binary,
            is_renamed=self.is_renamed,
            is_deleted=self.is_deleted,
        )


def _iter_lines(data: bytes) -> Iterable[str]:
    # Diffs carry arbitrary source bytes; surrogateescape keeps every line
    # (and so every line number) intact whatever the encoding.
    text = data.decode("utf-8", errors="surrogateescape")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def unquote_path(token: str) -> str:
    """Undo git's C-style quoting, e.g. "a/h\\303\\251.go" -> a/hé.go.

    Unquoted tokens are returned unchanged.
    """
    if len(token) < 2 or token[0] != '"' or token[-1] != '"':
        return token

    body = token[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out += ch.encode("utf-8", errors="surrogateescape")
            i += 1
            continue
        escape = body[i + 1 : i + 2]
        if escape and escape in _ESCAPES:
            out.append(_ESCAPES[escape])
            i += 2
        elif _OCTAL_RE.fullmatch(body[i + 1 : i + 4]):
            out.append(int(body[i + 1 : i + 4], 8) & 0xFF)
            i += 4
        else:
            out += b"\\"
            i += 1
    return out.decode("utf-8", errors="surrogateescape")


def _strip_side(token: str, prefix: str) -> str:
    path = unquote_path(token)
    return path[len(prefix) :] if path.startswith(prefix) else path


def _header_names(line: str) -> tuple[str, str]:
    plain = _DIFF_HEADER_RE.match(line)
    if plain:
        return plain.group(1), plain.group(2)
    quoted = _QUOTED_HEADER_RE.match(line)
    if quoted:
        return _strip_side(quoted.group(1), "a/"), _strip_side(quoted.group(2), "b/")
    # Unrecognized header: names come from the ---/+++ lines, if any
    return "", ""


def parse_diff(data: bytes) -> list[FileDiff]:
    """Parse a unified diff into per-file change records.

    Args:
        data: Output of `git diff`, `git diff-tree -p` or an equivalent.

    Returns:
        One FileDiff per `diff --git` section, in diff order.

    Raises:
        InputError: If data is empty.
    """
    if not data:
        raise InputError.empty("diff data")

    file_diffs: list[FileDiff] = []
    current: _Section | None = None
    line_no = 0  # current line number in the new file

    for line in _iter_lines(data):
        # Every "diff --git " line opens a new section, even one whose
        # paths cannot be parsed, so lines never carry over between files
        if line.startswith(_DIFF_PREFIX):
            if current is not None:
                file_diffs.append(current.freeze())
            old_name, new_name = _header_names(line)
            current = _Section(old_name=old_name, new_name=new_name)
            line_no = 0
            continue

        if current is None:
            continue

        if _BINARY_RE.match(line):
            current.is_binary = True
            continue
        if _DELETED_RE.match(line):
            current.is_deleted = True
            continue
        if _RENAMED_RE.match(line):
            current.is_renamed = True
            continue

        old_file = _OLD_FILE_RE.match(line)
        if old_file:
            current.old_name = _strip_side(old_file.group(1), "a/")
            continue
        new_file = _NEW_FILE_RE.match(line)
        if new_file:
            current.new_name = _strip_side(new_file.group(1), "b/")
            continue

        hunk = _HUNK_HEADER_RE.match(line)
        if hunk:
            line_no = int(hunk.group(3))
            continue

        if not line:
            # Some tools strip the leading space from empty context lines
            line_no += 1
            continue

        marker = line[0]
        if marker == "+":
            if not line.startswith("+++"):
                current.added_lines.append(line_no)
                line_no += 1
        elif marker == " ":
            line_no += 1
        # "-" lines only exist in the old file; "\" is "No newline at end of file"

    if current is not None:
        file_diffs.append(current.freeze())

    return file_diffs


def normalize_filename(filename: str) -> str:
    """Remove the a/ or b/ prefix from a diff filename."""
    if filename.startswith(("a/", "b/")):
        return filename[2:]
    return filename


def added_lines_by_file(
    file_diffs: Iterable[FileDiff],
    extensions: Sequence[str] = DEFAULT_SOURCE_EXTENSIONS,
) -> dict[str, list[int]]:
    """Map new file name to added lines, for source files only.

    Binary files, deleted files, files without additions and files whose
    name does not end with one of the extensions are left out.
    """
    suffixes = tuple(extensions)
    result: dict[str, list[int]] = {}
    for diff in file_diffs:
        if diff.is_binary or diff.is_deleted or not diff.added_lines:
            continue
        if not diff.new_name.endswith(suffixes):
            continue
        result[diff.new_name] = list(diff.added_lines)
    return result


def total_added_lines(added: Mapping[str, Sequence[int]]) -> int:
    return sum(len(lines) for lines in added.values())
