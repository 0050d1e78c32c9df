"""Go coverage profile parsing and serialization.

Go test produces coverage profiles with format:
mode: set|count|atomic
<package>/<file>:<startline>.<startcol>,<endline>.<endcol> <numstmt> <count>

Example:
mode: set
github.com/user/pkg/main.go:10.2,12.16 3 1
github.com/user/pkg/main.go:15.2,20.16 5 0

- mode: set (0/1), count (hit count), atomic (thread-safe count)
- numstmt: number of statements in block
- count: execution count (0 = not covered)

Parsing follows golang.org/x/tools/cover: profiles come back sorted by file
name, blocks sorted by start position, and repeated samples of one block
folded together. serialize_profiles writes the same format back out.
"""

import io
import re
import zipfile
import zlib
from collections.abc import Sequence

import structlog

from canopy.core.errors import (
    FormatError,
    InputError,
    NoProfilesError,
    NoValidFilesError,
    ProfileValidationError,
)
from canopy.coverage.models import MODE_SET, Profile, ProfileBlock

log = structlog.get_logger(__name__)

_MODE_PREFIX = "mode: "
# Corrupt data (bad CRC, broken deflate stream), encryption or an
# unsupported compression method in a single member
_MEMBER_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    OSError,
    NotImplementedError,
    RuntimeError,
)
_BLOCK_LINE_RE = re.compile(
    r"^(?P<file>.+):(?P<sl>[0-9]+)\.(?P<sc>[0-9]+),(?P<el>[0-9]+)\.(?P<ec>[0-9]+) "
    r"(?P<stmts>[0-9]+) (?P<count>[0-9]+)$"
)


def _split_lines(text: str) -> list[str]:
    # Same framing as a line scanner: "\n" separated, trailing "\r" dropped,
    # no phantom empty line after a final newline.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _parse_block_line(line: str) -> tuple[str, ProfileBlock]:
    match = _BLOCK_LINE_RE.match(line)
    if match is None:
        raise FormatError.coverage(f"line {line!r} doesn't match expected format", line=line)
    block = ProfileBlock(
        start_line=int(match["sl"]),
        start_col=int(match["sc"]),
        end_line=int(match["el"]),
        end_col=int(match["ec"]),
        num_stmt=int(match["stmts"]),
        count=int(match["count"]),
    )
    return match["file"], block


def _fold_samples(mode: str, blocks: list[ProfileBlock]) -> tuple[ProfileBlock, ...]:
    """Sort blocks by start and fold repeated samples of the same span."""
    ordered = sorted(blocks, key=lambda b: b.sort_key)
    folded: list[ProfileBlock] = []
    for block in ordered:
        if folded:
            last = folded[-1]
            same_span = (
                block.start_line == last.start_line
                and block.start_col == last.start_col
                and block.end_line == last.end_line
                and block.end_col == last.end_col
            )
            if same_span:
                if block.num_stmt != last.num_stmt:
                    raise FormatError.coverage(
                        f"inconsistent NumStmt: changed from {last.num_stmt} to {block.num_stmt}"
                    )
                count = last.count | block.count if mode == MODE_SET else last.count + block.count
                folded[-1] = ProfileBlock(
                    last.start_line,
                    last.start_col,
                    last.end_line,
                    last.end_col,
                    last.num_stmt,
                    count,
                )
                continue
        folded.append(block)
    return tuple(folded)


def parse_profiles(data: bytes) -> list[Profile]:
    """Parse coverage data in standard Go coverage format.

    Args:
        data: Raw profile bytes (the content of a -coverprofile file).

    Returns:
        One Profile per distinct file name, sorted by file name.

    Raises:
        InputError: If data is empty.
        FormatError: If the mode line or any block line is malformed.
        NoProfilesError: If the data holds a mode line but no blocks.
    """
    if not data:
        raise InputError.empty("coverage data")

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError.coverage(f"not valid UTF-8: {e}") from e

    mode = ""
    blocks_by_file: dict[str, list[ProfileBlock]] = {}
    for line in _split_lines(text):
        if not mode:
            if not line.startswith(_MODE_PREFIX) or line == _MODE_PREFIX:
                raise FormatError.coverage(f"bad mode line: {line}", line=line)
            mode = line[len(_MODE_PREFIX) :]
            continue
        file_name, block = _parse_block_line(line)
        blocks_by_file.setdefault(file_name, []).append(block)

    profiles = [
        Profile(file_name=file_name, mode=mode, blocks=_fold_samples(mode, blocks))
        for file_name, blocks in sorted(blocks_by_file.items())
    ]
    if not profiles:
        raise NoProfilesError.none_found()
    return profiles


def is_coverage_file(name: str) -> bool:
    """Check if an archive member name looks like a coverage profile."""
    name = name.lower()
    return (
        name.endswith(".out")
        or name.endswith(".cov")
        or name.endswith("coverage.txt")
        or ("coverage" in name and name.endswith(".txt"))
    )


def parse_profiles_from_zip(data: bytes) -> list[Profile]:
    """Extract and parse every coverage file in a zip archive.

    Members that are empty, cannot be decompressed or fail to parse are
    skipped, so one malformed shard does not discard the rest of the run.

    Returns:
        All profiles from all members, concatenated in archive order.
        Not merged: pass the result to merge_profiles.

    Raises:
        InputError: If data is empty.
        FormatError: If data is not a readable zip archive.
        NoValidFilesError: If no member produced a profile.
    """
    if not data:
        raise InputError.empty("zip data")

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise FormatError.archive(str(e)) from e

    profiles: list[Profile] = []
    scanned = 0
    skipped: list[str] = []
    with archive:
        for info in archive.infolist():
            if info.is_dir() or not is_coverage_file(info.filename):
                continue
            scanned += 1

            try:
                member = archive.read(info)
            except _MEMBER_READ_ERRORS as e:
                skipped.append(info.filename)
                log.debug("coverage_member_unreadable", member=info.filename, error=str(e))
                continue

            if not member:
                skipped.append(info.filename)
                log.debug("coverage_member_empty", member=info.filename)
                continue

            try:
                member_profiles = parse_profiles(member)
            except (FormatError, NoProfilesError) as e:
                skipped.append(info.filename)
                log.debug("coverage_member_skipped", member=info.filename, error=str(e))
                continue

            log.debug("coverage_member_parsed", member=info.filename, profiles=len(member_profiles))
            profiles.extend(member_profiles)

    if not profiles:
        raise NoValidFilesError.in_archive(scanned, skipped)
    return profiles


def validate_profile(profile: Profile | None) -> None:
    """Check that a coverage profile is well-formed.

    Not called by the parsers; run it on profiles from untrusted sources
    before merging or analysis.

    Raises:
        ProfileValidationError: On the first problem found.
    """
    if profile is None:
        raise ProfileValidationError.invalid_profile("profile is None")
    if not profile.file_name:
        raise ProfileValidationError.invalid_profile("profile has empty filename")
    if not profile.mode:
        raise ProfileValidationError.invalid_profile("profile has empty mode")

    for index, block in enumerate(profile.blocks):
        reason = _block_problem(block)
        if reason is not None:
            raise ProfileValidationError.invalid_block(profile.file_name, index, reason)


def _block_problem(b: ProfileBlock) -> str | None:
    if b.start_line <= 0:
        return f"has invalid start line: {b.start_line}"
    if b.end_line <= 0:
        return f"has invalid end line: {b.end_line}"
    if b.end_line < b.start_line:
        return f"has end line ({b.end_line}) before start line ({b.start_line})"
    if b.start_line == b.end_line and b.end_col < b.start_col:
        return (
            f"has end column ({b.end_col}) before start column ({b.start_col}) on same line"
        )
    if b.num_stmt < 0:
        return f"has negative statement count: {b.num_stmt}"
    if b.count < 0:
        return f"has negative count: {b.count}"
    return None


def format_block(file_name: str, block: ProfileBlock) -> str:
    return (
        f"{file_name}:{block.start_line}.{block.start_col},"
        f"{block.end_line}.{block.end_col} {block.num_stmt} {block.count}"
    )


def serialize_profiles(profiles: Sequence[Profile]) -> bytes:
    """Convert profiles back to standard Go coverage format.

    The header uses the first profile's mode ("set" when blank); profiles
    and blocks are written in the order given.

    Raises:
        NoProfilesError: If there is nothing to serialize.
    """
    if not profiles:
        raise NoProfilesError.none_found("no profiles to serialize")

    mode = profiles[0].mode or MODE_SET
    out = io.StringIO()
    out.write(f"{_MODE_PREFIX}{mode}\n")
    for profile in profiles:
        for block in profile.blocks:
            out.write(format_block(profile.file_name, block))
            out.write("\n")
    return out.getvalue().encode("utf-8")
