"""lenticular run — execute a complete print job from a YAML file."""

from __future__ import annotations

from pathlib import Path

import click

from lenticular.cli.utils import console, error_handler, make_progress


@click.command()
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-c", "--config", "config_path", required=True, type=click.Path(exists=True, dir_okay=False),
    help="Print job YAML file.",
)
@click.option(
    "-o", "--output-dir", required=True, type=click.Path(file_okay=False),
    help="Directory for the raster, tiles and meshes.",
)
@click.option(
    "--mesh-format", type=click.Choice(["stl", "obj", "ply"]), default="stl", show_default=True,
    help="Mesh file format.",
)
@error_handler
def run(sources: tuple[str, ...], config_path: str, output_dir: str, mesh_format: str) -> None:
    """Interlace SOURCES, cut tiles and build lens meshes per a print job."""
    from lenticular.io import export_mesh, read_source_images, write_raster
    from lenticular.job import JobEngine, PrintJob

    job = PrintJob.from_yaml(Path(config_path))
    images = read_source_images([Path(s) for s in sources])

    with make_progress() as progress:
        task = progress.add_task("Running print job...", total=1.0)
        result = JobEngine().run(
            job, images,
            progress_callback=lambda f: progress.update(task, completed=f),
        )

    out_dir = Path(output_dir).expanduser()
    (out_dir / "tiles").mkdir(parents=True, exist_ok=True)
    (out_dir / "meshes").mkdir(parents=True, exist_ok=True)

    stage = result.stage
    dpi = job.output.dpi
    write_raster(stage.raster, out_dir / "interlaced.tif", dpi=dpi)
    for t in stage.tiles:
        write_raster(t.pixels, out_dir / "tiles" / f"tile_{t.label}.tif", dpi=dpi)
    for rm in stage.region_meshes:
        export_mesh(rm.lens, out_dir / "meshes" / f"region_{rm.index}_lens.{mesh_format}")
        export_mesh(rm.frame, out_dir / "meshes" / f"region_{rm.index}_frame.{mesh_format}")

    console.print()
    console.print("[green]Print job complete[/green]")
    console.print(f"  Tiles: {result.tile_count}")
    console.print(f"  Printer bed regions: {result.region_count}")
    console.print(f"  Lenticules: {result.lenticule_total}")
    console.print(f"  Elapsed: {result.elapsed_seconds:.1f}s")

    if result.warnings:
        console.print()
        console.print(f"[yellow]Warnings ({len(result.warnings)}):[/yellow]")
        for w in result.warnings:
            console.print(f"  [dim]- {w}[/dim]")
