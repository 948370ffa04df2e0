"""bcrange CLI - bcr command."""

import click

from bcrange import __version__
from bcrange.cli.conflicts import conflicts_command
from bcrange.cli.next_id import next_id_command
from bcrange.cli.unused import unused_command
from bcrange.cli.used import used_command
from bcrange.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="bcr")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """bcrange - object id range analysis for AL workspaces."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(used_command, name="used")
cli.add_command(unused_command, name="unused")
cli.add_command(conflicts_command, name="conflicts")
cli.add_command(next_id_command, name="next-id")


if __name__ == "__main__":
    cli()
