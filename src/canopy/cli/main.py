"""Canopy CLI - canopy command."""

import click

from canopy.cli.analyze import analyze_command
from canopy.cli.merge import merge_command
from canopy.cli.validate import validate_command
from canopy.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version="0.1.0", prog_name="canopy")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Canopy - find the lines a change added that no test executed."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")
    set_run_id()


cli.add_command(analyze_command, name="analyze")
cli.add_command(merge_command, name="merge")
cli.add_command(validate_command, name="validate")


if __name__ == "__main__":
    cli()
