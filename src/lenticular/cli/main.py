"""lenticular CLI — top-level Click group."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="lenticular")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and full tracebacks.")
def cli(verbose: bool) -> None:
    """Lenticular print builder — interlace, tile and generate lens meshes."""
    from lenticular.cli import utils

    utils.verbose = verbose
    utils.configure_logging(verbose)


def _register_commands() -> None:
    """Register all subcommands — imports deferred to avoid loading heavy deps at startup."""
    from lenticular.cli.interlace import interlace
    from lenticular.cli.mesh import mesh
    from lenticular.cli.presets import presets
    from lenticular.cli.run import run
    from lenticular.cli.tile import plan, tile

    cli.add_command(interlace)
    cli.add_command(mesh)
    cli.add_command(plan)
    cli.add_command(presets)
    cli.add_command(run)
    cli.add_command(tile)


_register_commands()
