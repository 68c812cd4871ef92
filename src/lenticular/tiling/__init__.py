"""lenticular tiling — lenticule-aligned print tiles and printer-bed regions."""

from lenticular.tiling.extractor import Tile, TileRasterExtractor
from lenticular.tiling.planner import (
    MAX_LAYOUT_ITERATIONS,
    MIN_TILE_IN,
    TileLayoutPlanner,
    count_cuts,
    group_regions,
    select_strategy,
)

__all__ = [
    "MAX_LAYOUT_ITERATIONS",
    "MIN_TILE_IN",
    "Tile",
    "TileLayoutPlanner",
    "TileRasterExtractor",
    "count_cuts",
    "group_regions",
    "select_strategy",
]
