"""TileRasterExtractor — cut the interlaced raster into printable tiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from lenticular.core.exceptions import CropOutOfBoundsError
from lenticular.core.models import TileConfiguration, TileLayout, TileMode
from lenticular.core.progress import CancelCheck, ProgressCallback, ProgressTracker
from lenticular.tiling.marks import PAPER_COLOR, draw_corner_marks, draw_label, tile_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Tile:
    """One printable tile.

    Attributes:
        row: Grid row index.
        column: Grid column index.
        rect: ``(x0, y0, x1, y1)`` crop rectangle in the interlaced raster.
        pixels: (H, W, 4) uint8 tile raster, including any margins.
        label: Human-readable position label.
    """

    row: int
    column: int
    rect: tuple[int, int, int, int]
    pixels: np.ndarray
    label: str

    @property
    def margin(self) -> tuple[int, int]:
        """Extra (horizontal, vertical) pixels added on each side of the crop."""
        x0, y0, x1, y1 = self.rect
        return (
            (self.pixels.shape[1] - (x1 - x0)) // 2,
            (self.pixels.shape[0] - (y1 - y0)) // 2,
        )


class TileRasterExtractor:
    """Crop tiles from an interlaced raster following a ``TileLayout``."""

    def extract(
        self,
        raster: np.ndarray,
        layout: TileLayout,
        config: TileConfiguration,
        progress_callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> list[Tile]:
        """Produce one tile per grid cell in row-major order.

        Args:
            raster: (H, W, 4) uint8 interlaced raster.
            layout: Planned boundaries for this raster.
            config: Finishing mode, bleed and registration settings.
            progress_callback: Optional callback receiving a fraction in [0, 1].
            cancel_check: Optional callable; returning True stops the run.

        Returns:
            List of Tile objects.

        Raises:
            CropOutOfBoundsError: If a planned rectangle exceeds the raster.
            OperationCancelledError: If ``cancel_check`` returned True.
        """
        tracker = ProgressTracker(progress_callback, cancel_check, "Tile extraction")
        raster_h, raster_w = raster.shape[:2]
        total = layout.num_rows * layout.num_columns
        tiles: list[Tile] = []

        for index, (row, column, rect) in enumerate(layout.iter_tiles()):
            tracker.check_cancelled()
            x0, y0, x1, y1 = rect
            if not (0 <= x0 < x1 <= raster_w and 0 <= y0 < y1 <= raster_h):
                raise CropOutOfBoundsError(rect, (raster_w, raster_h))

            crop = raster[y0:y1, x0:x1]
            label = tile_label(row, column)
            tiles.append(Tile(
                row=row,
                column=column,
                rect=rect,
                pixels=self._finish(crop, label, layout.dpi, config),
                label=label,
            ))
            tracker.update((index + 1) / total)

        logger.debug("Extracted %d tiles (%s)", len(tiles), config.mode.value)
        tracker.finish()
        return tiles

    def _finish(
        self,
        crop: np.ndarray,
        label: str,
        dpi: int,
        config: TileConfiguration,
    ) -> np.ndarray:
        if config.mode is TileMode.WITH_BLEED:
            bleed = int(round(config.bleed_amount_in * dpi))
            return np.pad(crop, ((bleed, bleed), (bleed, bleed), (0, 0)), mode="edge")

        if config.mode is TileMode.WITH_REGISTRATION:
            margin = int(round(config.registration_margin_in * dpi))
            height, width = crop.shape[:2]
            canvas = np.empty((height + 2 * margin, width + 2 * margin, 4), dtype=np.uint8)
            canvas[:] = PAPER_COLOR
            canvas[margin:margin + height, margin:margin + width] = crop
            if margin > 0:
                # Label lives in the top-left corner square, clipped to it
                canvas[:margin, :margin] = draw_label(canvas[:margin, :margin], label, (2, 2))
            if config.show_registration_marks:
                draw_corner_marks(canvas, margin, dpi)
            return canvas

        return crop.copy()
