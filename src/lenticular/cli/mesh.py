"""lenticular mesh — lens and alignment-frame meshes for one region."""

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
@click.option("--width-mm", type=float, required=True, help="Region width across the lenticules.")
@click.option("--depth-mm", type=float, required=True, help="Region depth along the lenticules.")
@click.option(
    "-o", "--output", required=True, type=click.Path(dir_okay=False),
    help="Lens mesh file (.stl, .obj or .ply).",
)
@click.option("--segments", type=int, default=16, show_default=True, help="Angular segments per lenticule.")
@click.option(
    "--frame", "frame_output", type=click.Path(dir_okay=False), default=None,
    help="Also write an alignment frame mesh to this file.",
)
@click.option("--frame-width", type=float, default=5.0, show_default=True, help="Frame border width in mm.")
@click.option("--frame-height", type=float, default=0.6, show_default=True, help="Frame height in mm.")
@lens_options
@error_handler
def mesh(
    width_mm: float,
    depth_mm: float,
    output: str,
    segments: int,
    frame_output: str | None,
    frame_width: float,
    frame_height: float,
    lpi: float | None,
    preset: str | None,
    lens_height: float | None,
) -> None:
    """Generate a printable lens mesh for a WIDTH x DEPTH region."""
    from lenticular.io import export_mesh
    from lenticular.mesh import AlignmentFrameBuilder, LensMeshBuilder, lenticule_count

    lens = resolve_lens(lpi, preset, lens_height)
    with make_progress() as progress:
        task = progress.add_task("Building lens...", total=1.0)
        lens_mesh = LensMeshBuilder(segments).build(
            width_mm, depth_mm, lens,
            progress_callback=lambda f: progress.update(task, completed=f),
        )
    out_path = export_mesh(lens_mesh, Path(output).expanduser())
    console.print(
        f"[green]Lens mesh[/green]: {lenticule_count(width_mm, lens.pitch)} lenticules, "
        f"{lens_mesh.vertex_count} vertices, {lens_mesh.triangle_count} triangles -> {out_path}"
    )

    if frame_output is not None:
        frame_mesh = AlignmentFrameBuilder().build(width_mm, depth_mm, frame_width, frame_height)
        frame_path = export_mesh(frame_mesh, Path(frame_output).expanduser())
        console.print(f"[green]Alignment frame[/green] -> {frame_path}")
