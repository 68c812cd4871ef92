"""lenticular presets — list built-in lens presets."""

from __future__ import annotations

import click
from rich.table import Table

from lenticular.cli.utils import console


@click.command()
def presets() -> None:
    """List built-in lens presets."""
    from lenticular.core.models import LENS_PRESETS

    table = Table(title="Lens presets")
    table.add_column("Name", no_wrap=True)
    table.add_column("LPI", justify="right")
    table.add_column("Pitch mm", justify="right")
    table.add_column("Radius mm", justify="right")
    table.add_column("Height mm", justify="right")
    table.add_column("View", justify="right")
    for name, lens in LENS_PRESETS.items():
        table.add_row(
            name,
            f"{lens.lpi:g}",
            f"{lens.pitch:.4f}",
            f"{lens.radius:.3f}",
            f"{lens.height:.2f}",
            f"{lens.viewing_angle:.1f}°",
        )
    console.print(table)
