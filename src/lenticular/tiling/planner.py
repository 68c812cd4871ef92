"""TileLayoutPlanner — lenticule-aligned cut lines and printer-bed groups."""

from __future__ import annotations

import logging
import math
from typing import Callable

from lenticular.core.exceptions import (
    DegenerateLayoutError,
    LayoutIterationLimitExceededError,
)
from lenticular.core.models import (
    BedSize,
    LayoutStrategy,
    PrinterBedRegion,
    TileConfiguration,
    TileLayout,
)
from lenticular.core.units import pixels_per_lenticule

logger = logging.getLogger(__name__)

MIN_TILE_IN = 0.5
MAX_LAYOUT_ITERATIONS = 10_000

# Tolerance, in pixels, when deciding whether a paper size divides the image
_DIVISION_TOLERANCE_PX = 0.5
_SIZE_TOLERANCE_IN = 1e-9


def count_cuts(
    image_width: int,
    image_height: int,
    paper_width_px: float,
    paper_height_px: float,
) -> int:
    """Estimate the number of cuts needed to tile an image with one paper orientation.

    Every row needs a cut when the width does not divide evenly by the paper
    width, and every column needs one when the height does not divide evenly
    by the paper height.
    """
    columns = math.ceil(image_width / paper_width_px - 1e-9)
    rows = math.ceil(image_height / paper_height_px - 1e-9)
    cuts = 0
    if not _divides(image_width, paper_width_px):
        cuts += rows
    if not _divides(image_height, paper_height_px):
        cuts += columns
    return cuts


def _divides(length_px: float, step_px: float) -> bool:
    remainder = math.fmod(length_px, step_px)
    return remainder <= _DIVISION_TOLERANCE_PX or step_px - remainder <= _DIVISION_TOLERANCE_PX


def select_strategy(
    image_width: int,
    image_height: int,
    dpi: int,
    config: TileConfiguration,
) -> LayoutStrategy:
    """Pick the paper orientation needing the fewest cuts; ties favour portrait."""
    paper_w = config.tile_width_in * dpi
    paper_h = config.tile_height_in * dpi
    portrait = count_cuts(image_width, image_height, paper_w, paper_h)
    landscape = count_cuts(image_width, image_height, paper_h, paper_w)
    logger.debug("Cut score: portrait=%d landscape=%d", portrait, landscape)
    if landscape < portrait:
        return LayoutStrategy.LANDSCAPE_REMAINDER_BOTTOM
    return LayoutStrategy.PORTRAIT_REMAINDER_RIGHT


def _walk_boundaries(
    length: int,
    step: float,
    min_tile: float,
    snap: Callable[[float], int],
    from_end: bool = False,
    axis: str = "columns",
) -> list[int]:
    """Place interior cut lines along one axis.

    Starting from one edge, each candidate sits one paper ``step`` past the
    last accepted cut and is snapped to the allowed grid. A snapped cut that
    leaves less than ``min_tile`` on either side is discarded. The candidate
    position is the progress variable: it must strictly increase on every
    iteration, and the walk is bounded by ``MAX_LAYOUT_ITERATIONS``.

    Args:
        length: Axis length in pixels.
        step: Paper size along the axis in pixels.
        min_tile: Minimum tile size in pixels.
        snap: Maps an absolute pixel position to an allowed cut position.
        from_end: Walk from ``length`` towards 0, leaving the remainder at 0.
        axis: Name used in error messages.

    Returns:
        Strictly increasing interior cut positions.

    Raises:
        LayoutIterationLimitExceededError: If the walk stalls or runs too long.
    """
    boundaries: list[int] = []
    anchor = 0.0
    candidate = step
    progress = -math.inf

    for _ in range(MAX_LAYOUT_ITERATIONS):
        if candidate <= progress:
            raise LayoutIterationLimitExceededError(
                f"Boundary walk along {axis} stalled at {candidate:.1f} px; "
                f"paper step {step:.1f} px is too small for the lens grid",
                axis=axis,
                step_px=step,
                position_px=candidate,
            )
        progress = candidate
        if candidate >= length:
            break

        absolute = length - candidate if from_end else candidate
        snapped = snap(absolute)
        distance = length - snapped if from_end else snapped

        if distance - anchor < min_tile or length - distance < min_tile:
            # Too close to the previous cut or the far edge; try one step further
            candidate += step
            continue

        boundaries.append(snapped)
        anchor = float(distance)
        candidate = anchor + step
    else:
        raise LayoutIterationLimitExceededError(
            f"Boundary walk along {axis} exceeded {MAX_LAYOUT_ITERATIONS} iterations",
            axis=axis,
            step_px=step,
            iterations=MAX_LAYOUT_ITERATIONS,
        )

    return sorted(boundaries)


def group_regions(
    column_widths_in: list[float],
    row_heights_in: list[float],
    bed: BedSize,
) -> list[PrinterBedRegion]:
    """Greedily merge adjacent tiles into printer-bed sized regions.

    Columns are merged while their combined width fits the bed; within each
    column group, rows are merged while their combined height fits.

    Raises:
        DegenerateLayoutError: If a single tile is larger than the bed.
    """
    for index, width in enumerate(column_widths_in):
        if width > bed.width_in + _SIZE_TOLERANCE_IN:
            raise DegenerateLayoutError(
                f"Tile column {index} is {width:.3f} in wide, larger than the "
                f"{bed.width_in:.3f} in printer bed",
                column=index,
                tile_width_in=width,
                bed_width_in=bed.width_in,
            )
    for index, height in enumerate(row_heights_in):
        if height > bed.height_in + _SIZE_TOLERANCE_IN:
            raise DegenerateLayoutError(
                f"Tile row {index} is {height:.3f} in tall, larger than the "
                f"{bed.height_in:.3f} in printer bed",
                row=index,
                tile_height_in=height,
                bed_height_in=bed.height_in,
            )

    regions: list[PrinterBedRegion] = []
    for col_start, col_end in _greedy_runs(column_widths_in, bed.width_in):
        for row_start, row_end in _greedy_runs(row_heights_in, bed.height_in):
            regions.append(PrinterBedRegion(col_start, col_end, row_start, row_end))
    return regions


def _greedy_runs(sizes: list[float], limit: float) -> list[tuple[int, int]]:
    """Split ``sizes`` into consecutive runs whose sums stay within ``limit``."""
    runs: list[tuple[int, int]] = []
    start = 0
    total = 0.0
    for index, size in enumerate(sizes):
        if index > start and total + size > limit + _SIZE_TOLERANCE_IN:
            runs.append((start, index))
            start = index
            total = 0.0
        total += size
    if sizes:
        runs.append((start, len(sizes)))
    return runs


class TileLayoutPlanner:
    """Plan paper tiles whose vertical cuts never bisect a lenticule.

    Args:
        min_tile_in: Smallest tile allowed on either side of a cut, in inches.
    """

    def __init__(self, min_tile_in: float = MIN_TILE_IN) -> None:
        if min_tile_in <= 0:
            raise ValueError(f"min_tile_in must be positive, got {min_tile_in}")
        self._min_tile_in = min_tile_in

    def plan(
        self,
        image_width: int,
        image_height: int,
        dpi: int,
        lpi: float,
        config: TileConfiguration,
        bed: BedSize,
        strategy: LayoutStrategy | str | None = None,
    ) -> TileLayout:
        """Compute cut positions and printer-bed regions.

        Args:
            image_width: Interlaced raster width in pixels.
            image_height: Interlaced raster height in pixels.
            dpi: Raster resolution.
            lpi: Lens lines per inch.
            config: Paper size and tile finishing options.
            bed: Maximum printer bed size.
            strategy: Explicit layout strategy; chosen automatically if None.

        Returns:
            TileLayout with interior boundaries and bed regions.

        Raises:
            DegenerateLayoutError: On non-positive sizes or an image smaller
                than the minimum tile.
            LayoutIterationLimitExceededError: If the boundary walk stalls.
        """
        self._validate(image_width, image_height, dpi, lpi, config, bed)

        if strategy is None:
            strategy = select_strategy(image_width, image_height, dpi, config)
        strategy = LayoutStrategy(strategy)

        if strategy.is_portrait:
            paper_w_in, paper_h_in = config.tile_width_in, config.tile_height_in
        else:
            paper_w_in, paper_h_in = config.tile_height_in, config.tile_width_in

        ppl = pixels_per_lenticule(dpi, lpi)
        min_tile_px = self._min_tile_in * dpi

        def snap_to_lenticule(position: float) -> int:
            return int(round(round(position / ppl) * ppl))

        def snap_to_pixel(position: float) -> int:
            return int(round(position))

        vertical = _walk_boundaries(
            image_width,
            paper_w_in * dpi,
            min_tile_px,
            snap_to_lenticule,
            from_end=strategy is LayoutStrategy.PORTRAIT_REMAINDER_LEFT,
            axis="columns",
        )
        horizontal = _walk_boundaries(
            image_height,
            paper_h_in * dpi,
            min_tile_px,
            snap_to_pixel,
            from_end=strategy is LayoutStrategy.LANDSCAPE_REMAINDER_TOP,
            axis="rows",
        )

        col_edges = [0, *vertical, image_width]
        row_edges = [0, *horizontal, image_height]
        regions = group_regions(
            [(b - a) / dpi for a, b in zip(col_edges, col_edges[1:])],
            [(b - a) / dpi for a, b in zip(row_edges, row_edges[1:])],
            bed,
        )

        logger.info(
            "Planned %dx%d tiles in %d bed region(s) using %s",
            len(col_edges) - 1, len(row_edges) - 1, len(regions), strategy.value,
        )
        return TileLayout(
            image_width=image_width,
            image_height=image_height,
            dpi=dpi,
            vertical_boundaries=tuple(vertical),
            horizontal_boundaries=tuple(horizontal),
            strategy=strategy,
            regions=tuple(regions),
        )

    def _validate(
        self,
        image_width: int,
        image_height: int,
        dpi: int,
        lpi: float,
        config: TileConfiguration,
        bed: BedSize,
    ) -> None:
        if config.tile_width_in <= 0 or config.tile_height_in <= 0:
            raise DegenerateLayoutError(
                f"Paper size must be positive, got "
                f"{config.tile_width_in} x {config.tile_height_in} in",
                tile_width_in=config.tile_width_in,
                tile_height_in=config.tile_height_in,
            )
        if min(config.tile_width_in, config.tile_height_in) < self._min_tile_in:
            raise DegenerateLayoutError(
                f"Paper {config.tile_width_in} x {config.tile_height_in} in is smaller "
                f"than the minimum tile of {self._min_tile_in} in",
                tile_width_in=config.tile_width_in,
                tile_height_in=config.tile_height_in,
                min_tile_in=self._min_tile_in,
            )
        if bed.width_in <= 0 or bed.height_in <= 0:
            raise DegenerateLayoutError(
                f"Printer bed size must be positive, got "
                f"{bed.width_in} x {bed.height_in} in",
                bed_width_in=bed.width_in,
                bed_height_in=bed.height_in,
            )
        if dpi <= 0 or lpi <= 0:
            raise DegenerateLayoutError(
                f"dpi and lpi must be positive, got dpi={dpi}, lpi={lpi}",
                dpi=dpi,
                lpi=lpi,
            )
        min_tile_px = self._min_tile_in * dpi
        if image_width < min_tile_px or image_height < min_tile_px:
            raise DegenerateLayoutError(
                f"Image {image_width}x{image_height} px is smaller than the "
                f"minimum tile of {self._min_tile_in} in at {dpi} dpi",
                image_width=image_width,
                image_height=image_height,
                min_tile_in=self._min_tile_in,
            )
