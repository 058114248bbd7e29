"""CloverLens CLI - cloverlens command."""

from pathlib import Path

import click

from cloverlens import __version__
from cloverlens.cli.import_report import import_command
from cloverlens.cli.run import run_command
from cloverlens.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="cloverlens")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of <project>/.cloverlens.yaml.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Path | None) -> None:
    """CloverLens - correlate PHP Clover coverage with source code."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_file"] = config_file
    configure_logging(verbose=verbose)


cli.add_command(run_command, name="run")
cli.add_command(import_command, name="import")


if __name__ == "__main__":
    cli()
