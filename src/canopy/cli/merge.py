"""canopy merge command - combine coverage profiles from several runs."""

from pathlib import Path

import click

from canopy.cli.utils import reported_errors
from canopy.coverage import merge_profiles, parse_profiles, serialize_profiles
from canopy.coverage.models import Profile


@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the merged profile here (default: stdout)",
)
def merge_command(files: tuple[Path, ...], output: Path | None) -> None:
    """Merge coverage profiles into one.

    All FILES must use the same coverage mode. Counts for the same block
    are summed (or take the max in set mode).
    """
    with reported_errors():
        profiles: list[Profile] = []
        for path in files:
            profiles.extend(parse_profiles(path.read_bytes()))
        data = serialize_profiles(merge_profiles(profiles))

    if output is None:
        click.get_binary_stream("stdout").write(data)
        return

    output.write_bytes(data)
    click.echo(f"Merged {len(files)} file(s) into {output}", err=True)
