"""lenticular job — print job configuration and the staged pipeline."""

from lenticular.job.engine import (
    Interlaced,
    JobEngine,
    JobResult,
    Meshed,
    Planned,
    RegionMeshes,
    Tiled,
    build_meshes,
    extract_tiles,
    interlace,
    plan,
)
from lenticular.job.models import DEFAULT_BED, PrintJob

__all__ = [
    "DEFAULT_BED",
    "Interlaced",
    "JobEngine",
    "JobResult",
    "Meshed",
    "Planned",
    "PrintJob",
    "RegionMeshes",
    "Tiled",
    "build_meshes",
    "extract_tiles",
    "interlace",
    "plan",
]
