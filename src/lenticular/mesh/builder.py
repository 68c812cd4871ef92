"""MeshBuilder — arena-style accumulation of vertices and triangles.

Each ``add_*`` call returns the ``range`` of vertex indices it appended, so
triangle indices can be written relative to that range instead of a
hand-maintained running offset.
"""

from __future__ import annotations

import numpy as np

from lenticular.core.models import Mesh

# Outward-facing quads of an axis-aligned box: (corner indices, normal).
# Corner i has bit 0 -> x max, bit 1 -> y max, bit 2 -> z max.
_BOX_FACES: tuple[tuple[tuple[int, int, int, int], tuple[float, float, float]], ...] = (
    ((0, 4, 6, 2), (-1.0, 0.0, 0.0)),
    ((1, 3, 7, 5), (1.0, 0.0, 0.0)),
    ((0, 1, 5, 4), (0.0, -1.0, 0.0)),
    ((2, 6, 7, 3), (0.0, 1.0, 0.0)),
    ((0, 2, 3, 1), (0.0, 0.0, -1.0)),
    ((4, 5, 7, 6), (0.0, 0.0, 1.0)),
)


class MeshBuilder:
    """Collect mesh pieces and assemble them into one ``Mesh``."""

    def __init__(self) -> None:
        self._vertices: list[np.ndarray] = []
        self._normals: list[np.ndarray] = []
        self._triangles: list[np.ndarray] = []
        self._vertex_count = 0

    @property
    def vertex_count(self) -> int:
        return self._vertex_count

    @property
    def triangle_count(self) -> int:
        return sum(len(t) for t in self._triangles)

    def add_vertices(self, positions: np.ndarray, normals: np.ndarray) -> range:
        """Append vertices and return their index range."""
        positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
        normals = np.asarray(normals, dtype=np.float32).reshape(-1, 3)
        if positions.shape != normals.shape:
            raise ValueError(
                f"positions {positions.shape} and normals {normals.shape} differ"
            )
        start = self._vertex_count
        self._vertices.append(positions)
        self._normals.append(normals)
        self._vertex_count += len(positions)
        return range(start, self._vertex_count)

    def add_triangles(self, block: range, local_triangles: np.ndarray) -> None:
        """Append triangles whose indices are relative to ``block``.

        Raises:
            ValueError: If a local index falls outside the block.
        """
        local = np.asarray(local_triangles, dtype=np.int64).reshape(-1, 3)
        if local.size and (local.min() < 0 or local.max() >= len(block)):
            raise ValueError(
                f"triangle indices must lie in [0, {len(block)}), "
                f"got [{local.min()}, {local.max()}]"
            )
        self._triangles.append(local + block.start)

    def add_quad(
        self,
        corners: np.ndarray,
        normal: tuple[float, float, float],
    ) -> range:
        """Add a flat quad given four corners in counter-clockwise order."""
        block = self.add_vertices(corners, np.tile(normal, (4, 1)))
        self.add_triangles(block, np.array([[0, 1, 2], [0, 2, 3]]))
        return block

    def add_box(
        self,
        min_corner: tuple[float, float, float],
        max_corner: tuple[float, float, float],
    ) -> range:
        """Add a closed axis-aligned box with flat per-face normals.

        Returns:
            Range covering the box's 24 vertices.
        """
        lo = np.asarray(min_corner, dtype=np.float64)
        hi = np.asarray(max_corner, dtype=np.float64)
        corners = np.array([
            [hi[0] if i & 1 else lo[0], hi[1] if i & 2 else lo[1], hi[2] if i & 4 else lo[2]]
            for i in range(8)
        ])
        start = self._vertex_count
        for face, normal in _BOX_FACES:
            self.add_quad(corners[list(face)], normal)
        return range(start, self._vertex_count)

    def build(self) -> Mesh:
        if not self._vertices:
            return Mesh(np.empty((0, 3)), np.empty((0, 3)), np.empty((0, 3)))
        return Mesh(
            vertices=np.concatenate(self._vertices),
            normals=np.concatenate(self._normals),
            triangles=(
                np.concatenate(self._triangles) if self._triangles else np.empty((0, 3))
            ),
        )
