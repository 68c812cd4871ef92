"""RasterInterlacer — column-wise interlacing of N frames under a lens."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from lenticular.core.exceptions import (
    DimensionMismatchError,
    EmptySourceSetError,
    InvalidOutputSizeError,
)
from lenticular.core.models import OutputSpec, SourceImage
from lenticular.core.progress import CancelCheck, ProgressCallback, ProgressTracker
from lenticular.core.units import pixels_per_lenticule
from lenticular.interlace.resample import LETTERBOX_FILL, fit_to_canvas

logger = logging.getLogger(__name__)

DEFAULT_BATCH_COLUMNS = 256


def column_source_indices(width: int, dpi: float, lpi: float, num_sources: int) -> np.ndarray:
    """Source frame index for every output column.

    Column ``x`` lies at ``x mod (dpi / lpi)`` within its lenticule; that
    position, scaled by the number of sources, selects the frame. The result
    is clamped so the last fractional pixel of a lenticule cannot round past
    the final source.

    Args:
        width: Output width in pixels.
        dpi: Output resolution.
        lpi: Lens lines per inch.
        num_sources: Number of frames being interlaced.

    Returns:
        int64 array of shape (width,).
    """
    if num_sources < 1:
        raise EmptySourceSetError()
    ppl = pixels_per_lenticule(dpi, lpi)
    x = np.arange(width, dtype=np.float64)
    position = np.mod(x, ppl)
    indices = np.floor((position / ppl) * num_sources).astype(np.int64)
    return np.clip(indices, 0, num_sources - 1)


class RasterInterlacer:
    """Combine equal-sized source frames into one interlaced raster.

    Args:
        batch_columns: Number of columns copied between progress reports
            and cancellation checks.
        fill: Letterbox colour used when a frame does not match the output
            aspect ratio.
    """

    def __init__(
        self,
        batch_columns: int = DEFAULT_BATCH_COLUMNS,
        fill: tuple[int, int, int, int] = LETTERBOX_FILL,
    ) -> None:
        if batch_columns < 1:
            raise ValueError(f"batch_columns must be >= 1, got {batch_columns}")
        self._batch_columns = batch_columns
        self._fill = fill

    def interlace(
        self,
        sources: Sequence[SourceImage],
        lpi: float,
        output: OutputSpec,
        progress_callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> np.ndarray:
        """Interlace source frames column by column.

        Args:
            sources: Frames to combine, ordered by ``SourceImage.order``.
            lpi: Lens lines per inch.
            output: Output pixel size and DPI.
            progress_callback: Optional callback receiving a fraction in [0, 1].
            cancel_check: Optional callable; returning True stops the run.

        Returns:
            (output.height, output.width, 4) uint8 premultiplied RGBA raster.

        Raises:
            EmptySourceSetError: If ``sources`` is empty.
            DimensionMismatchError: If sources differ in pixel size.
            InvalidOutputSizeError: If the output width or height is not positive.
            OperationCancelledError: If ``cancel_check`` returned True.
        """
        if not sources:
            raise EmptySourceSetError()
        if output.width <= 0 or output.height <= 0:
            raise InvalidOutputSizeError(output.width, output.height)

        ordered = sorted(sources, key=lambda s: s.order)
        expected = ordered[0].size
        for i, source in enumerate(ordered[1:], start=1):
            if source.size != expected:
                raise DimensionMismatchError(expected, source.size, index=i)

        tracker = ProgressTracker(progress_callback, cancel_check, "Interlacing")
        canvas_size = (output.width, output.height)

        # Resample each frame once, never per pixel
        frames = []
        for source in ordered:
            tracker.check_cancelled()
            frames.append(fit_to_canvas(source.pixels, canvas_size, self._fill))

        indices = column_source_indices(output.width, output.dpi, lpi, len(frames))
        logger.debug(
            "Interlacing %d frames into %dx%d (%.3f px/lenticule)",
            len(frames), output.width, output.height,
            pixels_per_lenticule(output.dpi, lpi),
        )

        result = np.empty((output.height, output.width, 4), dtype=np.uint8)
        num_batches = math.ceil(output.width / self._batch_columns)
        for batch in range(num_batches):
            tracker.check_cancelled()
            start = batch * self._batch_columns
            stop = min(output.width, start + self._batch_columns)
            self._copy_columns(frames, indices, result, start, stop)
            tracker.update(stop / output.width)

        tracker.finish()
        return result

    @staticmethod
    def _copy_columns(
        frames: list[np.ndarray],
        indices: np.ndarray,
        result: np.ndarray,
        start: int,
        stop: int,
    ) -> None:
        """Fill columns ``[start, stop)`` of ``result`` from their frames."""
        columns = np.arange(start, stop)
        batch_indices = indices[start:stop]
        for frame_index in np.unique(batch_indices):
            selected = columns[batch_indices == frame_index]
            result[:, selected] = frames[frame_index][:, selected]
