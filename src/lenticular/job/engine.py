"""JobEngine — run a PrintJob through interlacing, tiling and meshing.

Each stage is an immutable record holding everything produced so far, and
each transition function takes the previous stage. A lens mesh can only
exist for a region of a planned layout, so no stage carries optional fields.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from lenticular.core.models import Mesh, PrinterBedRegion, SourceImage, TileLayout
from lenticular.core.progress import CancelCheck, ProgressCallback, ProgressTracker
from lenticular.interlace import RasterInterlacer
from lenticular.job.models import PrintJob
from lenticular.mesh import AlignmentFrameBuilder, LensMeshBuilder, lenticule_count
from lenticular.tiling import Tile, TileLayoutPlanner, TileRasterExtractor

logger = logging.getLogger(__name__)

# Share of overall progress given to each stage
_STAGE_WEIGHTS = {"interlace": 0.45, "plan": 0.05, "tiles": 0.15, "meshes": 0.35}


@dataclass(frozen=True, eq=False)
class Interlaced:
    """Stage 1: the interlaced raster."""

    job: PrintJob
    raster: np.ndarray


@dataclass(frozen=True, eq=False)
class Planned:
    """Stage 2: raster plus its tile layout."""

    job: PrintJob
    raster: np.ndarray
    layout: TileLayout


@dataclass(frozen=True, eq=False)
class Tiled:
    """Stage 3: layout plus the cropped tile rasters."""

    job: PrintJob
    raster: np.ndarray
    layout: TileLayout
    tiles: tuple[Tile, ...]


@dataclass(frozen=True, eq=False)
class RegionMeshes:
    """Lens and alignment frame for one printer-bed region."""

    index: int
    region: PrinterBedRegion
    size_mm: tuple[float, float]
    lens: Mesh
    frame: Mesh


@dataclass(frozen=True, eq=False)
class Meshed:
    """Stage 4: tiles plus one lens and frame per bed region."""

    job: PrintJob
    raster: np.ndarray
    layout: TileLayout
    tiles: tuple[Tile, ...]
    region_meshes: tuple[RegionMeshes, ...]


@dataclass(frozen=True)
class JobResult:
    """Summary of a completed job run."""

    stage: Meshed
    tile_count: int
    region_count: int
    lenticule_total: int
    elapsed_seconds: float
    warnings: list[str] = field(default_factory=list)


def interlace(
    job: PrintJob,
    sources: Sequence[SourceImage],
    tracker: ProgressTracker | None = None,
) -> Interlaced:
    tracker = tracker or ProgressTracker()
    raster = RasterInterlacer().interlace(
        sources,
        job.lens.lpi,
        job.output,
        progress_callback=tracker.update,
        cancel_check=tracker.is_cancelled,
    )
    return Interlaced(job=job, raster=raster)


def plan(stage: Interlaced, tracker: ProgressTracker | None = None) -> Planned:
    tracker = tracker or ProgressTracker()
    tracker.check_cancelled()
    job = stage.job
    height, width = stage.raster.shape[:2]
    layout = TileLayoutPlanner().plan(
        width, height, job.output.dpi, job.lens.lpi, job.tiling, job.bed, job.strategy,
    )
    tracker.finish()
    return Planned(job=job, raster=stage.raster, layout=layout)


def extract_tiles(stage: Planned, tracker: ProgressTracker | None = None) -> Tiled:
    tracker = tracker or ProgressTracker()
    tiles = TileRasterExtractor().extract(
        stage.raster,
        stage.layout,
        stage.job.tiling,
        progress_callback=tracker.update,
        cancel_check=tracker.is_cancelled,
    )
    return Tiled(
        job=stage.job, raster=stage.raster, layout=stage.layout, tiles=tuple(tiles),
    )


def build_meshes(stage: Tiled, tracker: ProgressTracker | None = None) -> Meshed:
    """Generate a lens and an alignment frame for every bed region.

    Regions are independent of each other; each one gets an equal share of
    the stage's progress range.
    """
    tracker = tracker or ProgressTracker()
    job, layout = stage.job, stage.layout
    lens_builder = LensMeshBuilder(job.segments_around)
    frame_builder = AlignmentFrameBuilder()
    count = len(layout.regions)
    results: list[RegionMeshes] = []

    for index, region in enumerate(layout.regions):
        tracker.check_cancelled()
        width_mm, depth_mm = layout.region_size_mm(region)
        region_tracker = tracker.child(index / count, 1.0 / count)
        lens = lens_builder.build(
            width_mm,
            depth_mm,
            job.lens,
            progress_callback=region_tracker.update,
            cancel_check=tracker.is_cancelled,
        )
        frame = frame_builder.build(
            width_mm, depth_mm, job.frame_width_mm, job.frame_height_mm,
        )
        results.append(RegionMeshes(
            index=index,
            region=region,
            size_mm=(width_mm, depth_mm),
            lens=lens,
            frame=frame,
        ))
        logger.debug(
            "Region %d (%.1fx%.1f mm): %d lens triangles",
            index, width_mm, depth_mm, lens.triangle_count,
        )

    tracker.finish()
    return Meshed(
        job=job,
        raster=stage.raster,
        layout=layout,
        tiles=stage.tiles,
        region_meshes=tuple(results),
    )


class JobEngine:
    """Runs every stage of a PrintJob in order."""

    def run(
        self,
        job: PrintJob,
        sources: Sequence[SourceImage],
        progress_callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> JobResult:
        """Execute the full pipeline.

        Args:
            job: Print job configuration.
            sources: Source frames to interlace.
            progress_callback: Optional callback receiving a fraction in [0, 1].
            cancel_check: Optional callable; returning True stops the run and
                discards all partial results.

        Returns:
            JobResult wrapping the final ``Meshed`` stage.

        Raises:
            LenticularError: Any typed error raised by a stage.
        """
        start = time.monotonic()
        root = ProgressTracker(progress_callback, cancel_check, "Print job")
        offset = 0.0

        def stage_tracker(name: str) -> ProgressTracker:
            nonlocal offset
            weight = _STAGE_WEIGHTS[name]
            child = root.child(offset, weight, operation=name)
            offset += weight
            return child

        interlaced = interlace(job, sources, stage_tracker("interlace"))
        planned = plan(interlaced, stage_tracker("plan"))
        tiled = extract_tiles(planned, stage_tracker("tiles"))
        meshed = build_meshes(tiled, stage_tracker("meshes"))
        root.finish()

        warnings = _layout_warnings(meshed)
        lenticule_total = sum(
            lenticule_count(rm.size_mm[0], job.lens.pitch) for rm in meshed.region_meshes
        )
        elapsed = time.monotonic() - start
        logger.info(
            "Job finished: %d tiles, %d regions in %.2fs",
            len(meshed.tiles), len(meshed.region_meshes), elapsed,
        )
        return JobResult(
            stage=meshed,
            tile_count=len(meshed.tiles),
            region_count=len(meshed.region_meshes),
            lenticule_total=lenticule_total,
            elapsed_seconds=round(elapsed, 3),
            warnings=warnings,
        )


def _layout_warnings(stage: Meshed) -> list[str]:
    """Flag tiles that ended up larger than the paper."""
    warnings: list[str] = []
    tiling, layout = stage.job.tiling, stage.layout
    if layout.strategy.is_portrait:
        paper_w, paper_h = tiling.tile_width_in, tiling.tile_height_in
    else:
        paper_w, paper_h = tiling.tile_height_in, tiling.tile_width_in
    for tile in stage.tiles:
        x0, y0, x1, y1 = tile.rect
        width_in, height_in = (x1 - x0) / layout.dpi, (y1 - y0) / layout.dpi
        if width_in > paper_w + 1e-6 or height_in > paper_h + 1e-6:
            warnings.append(
                f"{tile.label}: {width_in:.2f}x{height_in:.2f} in exceeds "
                f"{paper_w:g}x{paper_h:g} in paper"
            )
    return warnings
