"""lenticular plan / tile — lenticule-aligned print tiles."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from lenticular.cli.utils import (
    console,
    error_handler,
    lens_options,
    make_progress,
    resolve_lens,
)

_STRATEGIES = [
    "portrait-remainder-left",
    "portrait-remainder-right",
    "landscape-remainder-top",
    "landscape-remainder-bottom",
]
_MODES = ["edge-to-edge", "with-bleed", "with-registration"]


def _layout_options(func):
    """Attach paper, bed and strategy options shared by plan and tile."""
    func = click.option(
        "--strategy", type=click.Choice(_STRATEGIES), default=None,
        help="Layout strategy. Chosen by fewest cuts if omitted.",
    )(func)
    func = click.option(
        "--bed", nargs=2, type=float, default=(220.0, 220.0), show_default=True,
        metavar="W_MM H_MM", help="Maximum printer bed size in mm.",
    )(func)
    func = click.option(
        "--paper", nargs=2, type=float, default=(8.5, 11.0), show_default=True,
        metavar="W_IN H_IN", help="Paper size in inches.",
    )(func)
    return func


def print_layout(layout) -> None:
    """Render a TileLayout as Rich tables."""
    console.print(
        f"Strategy: [bold]{layout.strategy.value}[/bold]  "
        f"Grid: {layout.num_columns} column(s) x {layout.num_rows} row(s)"
    )
    console.print(f"Vertical cuts (px): {list(layout.vertical_boundaries)}")
    console.print(f"Horizontal cuts (px): {list(layout.horizontal_boundaries)}")

    table = Table(title="Printer bed regions")
    table.add_column("#", justify="right")
    table.add_column("Columns")
    table.add_column("Rows")
    table.add_column("Size (mm)", justify="right")
    for index, region in enumerate(layout.regions):
        width_mm, height_mm = layout.region_size_mm(region)
        table.add_row(
            str(index),
            f"{region.col_start}-{region.col_end - 1}",
            f"{region.row_start}-{region.row_end - 1}",
            f"{width_mm:.1f} x {height_mm:.1f}",
        )
    console.print(table)


@click.command()
@click.option("--width", type=int, required=True, help="Image width in pixels.")
@click.option("--height", type=int, required=True, help="Image height in pixels.")
@click.option("--dpi", type=int, default=300, show_default=True, help="Image resolution.")
@_layout_options
@lens_options
@error_handler
def plan(
    width: int,
    height: int,
    dpi: int,
    paper: tuple[float, float],
    bed: tuple[float, float],
    strategy: str | None,
    lpi: float | None,
    preset: str | None,
    lens_height: float | None,
) -> None:
    """Show the tile layout for an image size without reading any pixels."""
    from lenticular.core.models import BedSize, TileConfiguration
    from lenticular.tiling import TileLayoutPlanner

    lens = resolve_lens(lpi, preset, lens_height)
    layout = TileLayoutPlanner().plan(
        width, height, dpi, lens.lpi,
        TileConfiguration(tile_width_in=paper[0], tile_height_in=paper[1]),
        BedSize.from_mm(*bed),
        strategy,
    )
    print_layout(layout)


@click.command()
@click.argument("raster", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output-dir", required=True, type=click.Path(file_okay=False),
    help="Directory for the tile images.",
)
@click.option("--dpi", type=int, default=300, show_default=True, help="Raster resolution.")
@click.option(
    "--mode", type=click.Choice(_MODES), default="edge-to-edge", show_default=True,
    help="Tile finishing mode.",
)
@click.option("--bleed", type=float, default=0.125, show_default=True, help="Bleed in inches.")
@click.option("--no-marks", is_flag=True, help="Omit registration crosshairs.")
@click.option(
    "--format", "fmt", type=click.Choice(["tif", "png"]), default="tif", show_default=True,
    help="Tile image format.",
)
@_layout_options
@lens_options
@error_handler
def tile(
    raster: str,
    output_dir: str,
    dpi: int,
    mode: str,
    bleed: float,
    no_marks: bool,
    fmt: str,
    paper: tuple[float, float],
    bed: tuple[float, float],
    strategy: str | None,
    lpi: float | None,
    preset: str | None,
    lens_height: float | None,
) -> None:
    """Cut an interlaced RASTER into printable, lenticule-aligned tiles."""
    from lenticular.core.models import BedSize, TileConfiguration
    from lenticular.io import read_raster, write_raster
    from lenticular.tiling import TileLayoutPlanner, TileRasterExtractor

    lens = resolve_lens(lpi, preset, lens_height)
    data = read_raster(Path(raster))
    config = TileConfiguration(
        tile_width_in=paper[0],
        tile_height_in=paper[1],
        mode=mode,
        bleed_amount_in=bleed,
        show_registration_marks=not no_marks,
    )
    layout = TileLayoutPlanner().plan(
        data.shape[1], data.shape[0], dpi, lens.lpi, config, BedSize.from_mm(*bed), strategy,
    )
    print_layout(layout)

    out_dir = Path(output_dir).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    with make_progress() as progress:
        task = progress.add_task("Extracting tiles...", total=1.0)
        tiles = TileRasterExtractor().extract(
            data, layout, config,
            progress_callback=lambda f: progress.update(task, completed=f),
        )
    for t in tiles:
        write_raster(t.pixels, out_dir / f"tile_{t.label}.{fmt}", dpi=dpi)

    console.print(f"[green]Wrote {len(tiles)} tiles to {out_dir}[/green]")
