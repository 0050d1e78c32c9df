"""Coverage profile merging at block granularity.

When merging profiles from several test runs (parallel shards, retries,
per-package invocations), blocks are matched by position and statement
count, and their execution counts are combined per coverage mode:

- set: count = max(counts) (covered in any run)
- count, atomic: count = sum(counts)
- anything else: sum, same as count

The result is one profile per file, files sorted by name and blocks by
start position, so merging is deterministic and idempotent.
"""

from collections.abc import Iterable, Sequence

import structlog

from canopy.core.errors import ModeMismatchError, NoProfilesError
from canopy.coverage.models import (
    MODE_ATOMIC,
    MODE_COUNT,
    MODE_SET,
    BlockKey,
    Profile,
    ProfileBlock,
)

log = structlog.get_logger(__name__)


def merge_count(mode: str, a: int, b: int) -> int:
    """Combine two execution counts of the same block."""
    if mode == MODE_SET:
        return max(a, b)
    if mode in (MODE_COUNT, MODE_ATOMIC):
        return a + b
    # Unknown mode: treat as a tally
    return a + b


def _sorted_blocks(blocks: Iterable[ProfileBlock]) -> tuple[ProfileBlock, ...]:
    return tuple(sorted(blocks, key=lambda b: b.sort_key))


def merge_file_profiles(file_name: str, mode: str, profiles: Sequence[Profile]) -> Profile:
    """Merge all profiles recorded for a single file.

    The first occurrence of a block is kept as-is; later occurrences of the
    same block only contribute their count.
    """
    merged: dict[BlockKey, ProfileBlock] = {}
    for profile in profiles:
        for block in profile.blocks:
            existing = merged.get(block.key)
            if existing is None:
                merged[block.key] = block
            else:
                merged[block.key] = ProfileBlock(
                    start_line=existing.start_line,
                    start_col=existing.start_col,
                    end_line=existing.end_line,
                    end_col=existing.end_col,
                    num_stmt=existing.num_stmt,
                    count=merge_count(mode, existing.count, block.count),
                )

    return Profile(file_name=file_name, mode=mode, blocks=_sorted_blocks(merged.values()))


def merge_profiles(profiles: Sequence[Profile]) -> list[Profile]:
    """Merge coverage profiles into one profile per file.

    Args:
        profiles: Profiles from any number of runs and files.

    Returns:
        Merged profiles sorted by file name, blocks sorted by position.

    Raises:
        NoProfilesError: If profiles is empty.
        ModeMismatchError: If the profiles were recorded in different modes.
    """
    if not profiles:
        raise NoProfilesError.none_found("no profiles to merge")

    if len(profiles) == 1:
        only = profiles[0]
        return [
            Profile(file_name=only.file_name, mode=only.mode, blocks=_sorted_blocks(only.blocks))
        ]

    mode = profiles[0].mode
    for index, profile in enumerate(profiles):
        if profile.mode != mode:
            raise ModeMismatchError.at(index, profile.mode, mode)

    # Group profiles by file name
    by_file: dict[str, list[Profile]] = {}
    for profile in profiles:
        by_file.setdefault(profile.file_name, []).append(profile)

    merged = [
        merge_file_profiles(file_name, mode, file_profiles)
        for file_name, file_profiles in sorted(by_file.items())
    ]
    log.debug("profiles_merged", inputs=len(profiles), files=len(merged), mode=mode)
    return merged
