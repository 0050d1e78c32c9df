"""Fixtures for coverage tests."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable

import pytest

from canopy.coverage.models import Profile, ProfileBlock


@pytest.fixture
def block() -> Callable[..., ProfileBlock]:
    """Build a block spanning lines start..end."""

    def _make(
        start: int, end: int, count: int, *, stmts: int = 1, sc: int = 2, ec: int = 3
    ) -> ProfileBlock:
        return ProfileBlock(
            start_line=start, start_col=sc, end_line=end, end_col=ec, num_stmt=stmts, count=count
        )

    return _make


@pytest.fixture
def profile() -> Callable[..., Profile]:
    """Build a profile from blocks."""

    def _make(file_name: str, *blocks: ProfileBlock, mode: str = "set") -> Profile:
        return Profile(file_name=file_name, mode=mode, blocks=tuple(blocks))

    return _make


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    """Build an in-memory zip archive from {member name: content}."""

    def _make(members: dict[str, bytes]) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for name, content in members.items():
                zf.writestr(name, content)
        return buf.getvalue()

    return _make
