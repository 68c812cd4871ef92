"""lenticular IO — raster and mesh files for the command line."""

from lenticular.io.mesh_export import export_mesh
from lenticular.io.raster import (
    premultiply,
    read_raster,
    read_source_images,
    to_rgba8,
    unpremultiply,
    write_raster,
)

__all__ = [
    "export_mesh",
    "premultiply",
    "read_raster",
    "read_source_images",
    "to_rgba8",
    "unpremultiply",
    "write_raster",
]
