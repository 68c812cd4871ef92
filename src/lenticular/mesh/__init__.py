"""lenticular mesh — lens and alignment-frame meshes per printer-bed region."""

from lenticular.mesh.builder import MeshBuilder
from lenticular.mesh.frame import AlignmentFrameBuilder
from lenticular.mesh.lens import (
    DEFAULT_SEGMENTS_AROUND,
    LensMeshBuilder,
    lens_triangle_count,
    lens_vertex_count,
    lenticule_count,
)

__all__ = [
    "AlignmentFrameBuilder",
    "DEFAULT_SEGMENTS_AROUND",
    "LensMeshBuilder",
    "MeshBuilder",
    "lens_triangle_count",
    "lens_vertex_count",
    "lenticule_count",
]
