"""CLI utilities."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
import pygit2

from canopy.core.errors import CanopyError
from canopy.core.logging import get_logger

log = get_logger(__name__)


def find_repo_root(start_path: Path | None = None) -> Path:
    """Find the working directory of the git repository containing start_path.

    Outside a repository (or in a bare one) the start path itself is
    returned: analysis of a pre-read diff needs no repository, and the
    git-backed diff sources report the problem themselves.
    """
    if start_path is None:
        start_path = Path.cwd()
    start = start_path.resolve()

    discovered = pygit2.discover_repository(str(start))
    if discovered is None:
        return start
    workdir = pygit2.Repository(discovered).workdir
    return Path(workdir) if workdir else start


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn CanopyError into a ClickException (exit code 1, message on stderr)."""
    try:
        yield
    except CanopyError as e:
        log.debug("command_failed", error=e.error_name, details=e.details)
        raise click.ClickException(str(e)) from e
