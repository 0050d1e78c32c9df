"""Test fixtures for diff sources."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

CommitFiles = Callable[[dict[str, str], str], pygit2.Oid]


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Create a temporary git repository with initial commit."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    # Configure user
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    # Create initial commit
    (repo_path / "README.md").write_text("# Test Repo\n")
    repo.index.add("README.md")
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    repo.create_commit("refs/heads/main", sig, sig, "Initial commit", tree, [])

    # Set HEAD to main
    repo.set_head("refs/heads/main")

    yield repo


@pytest.fixture
def commit_files(temp_repo: pygit2.Repository) -> CommitFiles:
    """Write files into the working tree and commit them on HEAD."""

    def _commit(files: dict[str, str], message: str = "Update") -> pygit2.Oid:
        workdir = Path(temp_repo.workdir)
        for name, content in files.items():
            path = workdir / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            temp_repo.index.add(name)
        temp_repo.index.write()
        tree = temp_repo.index.write_tree()
        sig = temp_repo.default_signature
        return temp_repo.create_commit("HEAD", sig, sig, message, tree, [temp_repo.head.target])

    return _commit
