"""lenticular interlace — combine source frames into one interlaced raster."""

from __future__ import annotations

from pathlib import Path

import click

from lenticular.cli.utils import (
    console,
    error_handler,
    lens_options,
    make_progress,
    resolve_lens,
)


@click.command()
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output", required=True, type=click.Path(dir_okay=False),
    help="Output image (.tif keeps premultiplied alpha, .png otherwise).",
)
@click.option("--dpi", type=int, default=300, show_default=True, help="Output resolution.")
@click.option("--width", type=int, default=None, help="Output width in pixels (default: source width).")
@click.option("--height", type=int, default=None, help="Output height in pixels (default: source height).")
@lens_options
@error_handler
def interlace(
    sources: tuple[str, ...],
    output: str,
    dpi: int,
    width: int | None,
    height: int | None,
    lpi: float | None,
    preset: str | None,
    lens_height: float | None,
) -> None:
    """Interlace SOURCES (in the order given) for a lenticular lens."""
    from lenticular.core.models import OutputSpec
    from lenticular.interlace import RasterInterlacer
    from lenticular.io import read_source_images, write_raster

    lens = resolve_lens(lpi, preset, lens_height)
    images = read_source_images([Path(s) for s in sources])

    spec = OutputSpec.from_source(images[0], dpi=dpi)
    if width is not None and height is not None:
        spec = OutputSpec(width, height, dpi)
    elif width is not None:
        spec = spec.with_width(width)
    elif height is not None:
        spec = spec.with_height(height)

    with make_progress() as progress:
        task = progress.add_task("Interlacing...", total=1.0)
        raster = RasterInterlacer().interlace(
            images,
            lens.lpi,
            spec,
            progress_callback=lambda f: progress.update(task, completed=f),
        )

    out_path = Path(output).expanduser()
    write_raster(raster, out_path, dpi=dpi)
    console.print(
        f"[green]Interlaced {len(images)} images[/green] into "
        f"{spec.width}x{spec.height} px "
        f"({spec.physical_width_in:.2f}x{spec.physical_height_in:.2f} in) "
        f"at {lens.lpi:g} LPI -> {out_path}"
    )
