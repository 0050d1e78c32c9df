"""canopy validate command - check coverage profiles for malformed blocks."""

from pathlib import Path

import click

from canopy.core.errors import CanopyError
from canopy.coverage import parse_profiles, validate_profile


@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def validate_command(files: tuple[Path, ...]) -> None:
    """Validate coverage profiles.

    Every FILE is checked; each problem is printed and the command exits
    non-zero if any file failed.
    """
    failures = 0
    for path in files:
        try:
            profiles = parse_profiles(path.read_bytes())
            for profile in profiles:
                validate_profile(profile)
        except CanopyError as e:
            failures += 1
            click.echo(f"{path}: {e}", err=True)
            continue
        click.echo(f"{path}: ok ({len(profiles)} profile(s))")

    if failures:
        raise click.ClickException(f"{failures} of {len(files)} file(s) invalid")
