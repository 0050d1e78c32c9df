"""canopy analyze command - report added lines that tests never ran."""

import sys
from pathlib import Path

import click

from canopy.cli.utils import find_repo_root, reported_errors
from canopy.config import load_config
from canopy.core.logging import configure_logging
from canopy.diff import BytesDiffSource, DiffSource, select_diff_source
from canopy.format import FORMAT_IDS
from canopy.runner import LocalRunner


def _read_diff_file(diff_file: str) -> bytes:
    if diff_file == "-":
        return sys.stdin.buffer.read()
    return Path(diff_file).read_bytes()


@click.command()
@click.option(
    "--coverage",
    "coverage_path",
    type=click.Path(path_type=Path),
    help=(
        "Coverage directory, zip archive or profile file "
        "(default: coverage.directory from config)"
    ),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_IDS, case_sensitive=False),
    help="Report format (default: output.format from config)",
)
@click.option("--base", help="Base ref; analyze base...commit (commit defaults to HEAD)")
@click.option("--commit", help="Commit to analyze (alone: that commit against its parent)")
@click.option(
    "--repo",
    "repo_path",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository path (default: current directory)",
)
@click.option(
    "--diff-file",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
    help="Read the unified diff from a file ('-' for stdin) instead of git",
)
@click.pass_context
def analyze_command(
    ctx: click.Context,
    coverage_path: Path | None,
    output_format: str | None,
    base: str | None,
    commit: str | None,
    repo_path: Path,
    diff_file: str | None,
) -> None:
    """Find lines added in a diff that no test executed.

    Without --base, --commit or --diff-file the uncommitted changes in the
    working tree are analyzed, untracked files included.
    """
    if diff_file and (base or commit):
        raise click.UsageError("--diff-file cannot be combined with --base or --commit")

    repo_root = find_repo_root(repo_path)

    with reported_errors():
        overrides = {"output": {"format": output_format.lower()}} if output_format else {}
        config = load_config(repo_root, **overrides)
        if not (ctx.obj or {}).get("verbose"):
            configure_logging(config=config.logging)

        diff_source: DiffSource
        if diff_file:
            diff_source = BytesDiffSource(_read_diff_file(diff_file))
        else:
            diff_source = select_diff_source(base=base, commit=commit, repo_path=repo_root)

        runner = LocalRunner(
            config,
            diff_source,
            repo_root=repo_root,
            coverage_path=coverage_path,
            out=click.get_text_stream("stdout"),
            err=click.get_text_stream("stderr"),
        )
        runner.run()
