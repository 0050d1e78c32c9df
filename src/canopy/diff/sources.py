"""Diff sources: where the unified diff for an analysis comes from.

Every source exposes get_diff() -> bytes. The git-backed sources read the
repository through pygit2 and render the same patch text `git diff` would,
so the result feeds straight into parse_diff.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol

import pygit2
import structlog
from pygit2.enums import DiffOption

from canopy.core.errors import DiffSourceError

log = structlog.get_logger(__name__)

_UNTRACKED_FLAGS = (
    DiffOption.INCLUDE_UNTRACKED
    | DiffOption.RECURSE_UNTRACKED_DIRS
    | DiffOption.SHOW_UNTRACKED_CONTENT
)


class DiffSource(Protocol):
    """Anything that can produce unified diff bytes."""

    def get_diff(self) -> bytes:
        """Return the diff, or b"" when there are no changes.

        Raises:
            DiffSourceError: If the diff cannot be produced.
        """
        ...


class BytesDiffSource:
    """Diff that was already read (from a file, stdin or an API response)."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def get_diff(self) -> bytes:
        return self._data


class _GitDiffSource(ABC):
    """Shared pygit2 plumbing for the repository-backed sources."""

    name = "git diff"

    def __init__(self, repo_path: Path | str = ".") -> None:
        self._repo_path = Path(repo_path)

    def _open(self) -> pygit2.Repository:
        discovered = pygit2.discover_repository(str(self._repo_path))
        if discovered is None:
            raise DiffSourceError.failed(self.name, f"not a git repository: {self._repo_path}")
        try:
            return pygit2.Repository(discovered)
        except pygit2.GitError as e:
            raise DiffSourceError.failed(self.name, str(e)) from e

    def _resolve_commit(self, repo: pygit2.Repository, ref: str) -> pygit2.Commit:
        try:
            return repo.revparse_single(ref).peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise DiffSourceError.failed(self.name, f"reference not found: {ref}") from e

    def _empty_tree(self, repo: pygit2.Repository) -> pygit2.Tree:
        empty_tree_oid = repo.TreeBuilder().write()
        return repo.get(empty_tree_oid)  # type: ignore[return-value]

    def _render(self, diff: pygit2.Diff) -> bytes:
        patch = diff.patch
        if not patch:
            return b""
        return patch.encode("utf-8", errors="surrogateescape")

    def get_diff(self) -> bytes:
        repo = self._open()
        try:
            diff = self._diff(repo)
        except pygit2.GitError as e:
            raise DiffSourceError.failed(self.name, str(e)) from e
        data = self._render(diff)
        log.debug("diff_loaded", source=self.name, bytes=len(data))
        return data

    @abstractmethod
    def _diff(self, repo: pygit2.Repository) -> pygit2.Diff:
        """Build the pygit2 diff this source describes."""


class WorkingTreeDiffSource(_GitDiffSource):
    """Uncommitted changes: index vs working tree, untracked files included.

    Untracked files show up as whole-file additions, the same as after
    `git add -N .`, without touching the index.
    """

    name = "working tree diff"

    def _diff(self, repo: pygit2.Repository) -> pygit2.Diff:
        return repo.diff(flags=_UNTRACKED_FLAGS)


class RefRangeDiffSource(_GitDiffSource):
    """Changes from base to target, like `git diff base...target`.

    The diff starts at the merge base of the two commits, so only the
    changes made on the target side are reported (what a pull request adds).
    """

    name = "ref range diff"

    def __init__(self, base: str, target: str = "HEAD", repo_path: Path | str = ".") -> None:
        if not base:
            raise DiffSourceError.failed(self.name, "base ref is required")
        super().__init__(repo_path)
        self.base = base
        self.target = target

    def _diff(self, repo: pygit2.Repository) -> pygit2.Diff:
        base = self._resolve_commit(repo, self.base)
        target = self._resolve_commit(repo, self.target)
        merge_base = repo.merge_base(base.id, target.id)
        start = repo.get(merge_base) if merge_base is not None else base
        return repo.diff(start, target)


class CommitDiffSource(_GitDiffSource):
    """Changes introduced by one commit, like `git diff-tree -p --root`.

    A root commit is compared with the empty tree.
    """

    name = "commit diff"

    def __init__(self, commit: str, repo_path: Path | str = ".") -> None:
        if not commit:
            raise DiffSourceError.failed(self.name, "commit ref is required")
        super().__init__(repo_path)
        self.commit = commit

    def _diff(self, repo: pygit2.Repository) -> pygit2.Diff:
        commit = self._resolve_commit(repo, self.commit)
        if commit.parents:
            return repo.diff(commit.parents[0], commit)
        return repo.diff(self._empty_tree(repo), commit.tree)


def select_diff_source(
    *,
    base: str | None = None,
    commit: str | None = None,
    repo_path: Path | str = ".",
) -> DiffSource:
    """Pick a diff source from the CLI-style options.

    - base (optionally with commit): base...commit, commit defaults to HEAD
    - commit alone: that single commit
    - neither: the working tree
    """
    if base:
        return RefRangeDiffSource(base, commit or "HEAD", repo_path=repo_path)
    if commit:
        return CommitDiffSource(commit, repo_path=repo_path)
    return WorkingTreeDiffSource(repo_path)
