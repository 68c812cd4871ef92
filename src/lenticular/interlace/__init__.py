"""lenticular interlace — combine source frames under the lens pitch."""

from lenticular.interlace.interlacer import RasterInterlacer, column_source_indices
from lenticular.interlace.resample import fit_rect, fit_to_canvas

__all__ = [
    "RasterInterlacer",
    "column_source_indices",
    "fit_rect",
    "fit_to_canvas",
]
