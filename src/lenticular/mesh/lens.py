"""LensMeshBuilder — a slab topped by a row of half-cylinder lenticules.

Coordinates are millimeters: x runs across the lenticules, y is up (the
base sits at y = 0) and z runs along the lenticules through the region
depth.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from lenticular.core.exceptions import DegenerateLensGeometryError
from lenticular.core.models import LensParameters, Mesh
from lenticular.core.progress import CancelCheck, ProgressCallback, ProgressTracker
from lenticular.mesh.builder import MeshBuilder

logger = logging.getLogger(__name__)

DEFAULT_SEGMENTS_AROUND = 16
_PROGRESS_EVERY = 64
# Absorbs float error so widths that are exact multiples of the pitch count fully
_COUNT_EPSILON = 1e-9


def lenticule_count(width_mm: float, pitch: float) -> int:
    """Number of whole lenticules that fit across ``width_mm``."""
    if pitch <= 0:
        raise DegenerateLensGeometryError(f"pitch must be positive, got {pitch}", pitch=pitch)
    return int(math.floor(width_mm / pitch + _COUNT_EPSILON))


def lens_vertex_count(num_lenticules: int, segments_around: int) -> int:
    """Closed-form vertex count of a lens mesh."""
    return num_lenticules * 2 * (segments_around + 1) + 4


def lens_triangle_count(num_lenticules: int, segments_around: int) -> int:
    """Closed-form triangle count of a lens mesh."""
    return num_lenticules * 2 * segments_around + 2


def _strip_triangles(segments: int) -> np.ndarray:
    """Local triangles joining a front ring (0..s) to a back ring (s+1..2s+1)."""
    k = np.arange(segments)
    front, back = k, k + segments + 1
    first = np.stack([front, back, front + 1], axis=1)
    second = np.stack([front + 1, back, back + 1], axis=1)
    return np.stack([first, second], axis=1).reshape(-1, 3)


class LensMeshBuilder:
    """Build the printable lens for one printer-bed region.

    Args:
        segments_around: Angular steps across each half-cylinder; more
            segments give a smoother lens and more vertices.
    """

    def __init__(self, segments_around: int = DEFAULT_SEGMENTS_AROUND) -> None:
        self._segments = segments_around

    @property
    def segments_around(self) -> int:
        return self._segments

    def build(
        self,
        width_mm: float,
        depth_mm: float,
        lens: LensParameters,
        progress_callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> Mesh:
        """Generate the lens mesh for a ``width_mm`` x ``depth_mm`` region.

        Raises:
            DegenerateLensGeometryError: If the geometry cannot form a valid
                lens (see ``validate``).
            OperationCancelledError: If ``cancel_check`` returned True.
        """
        self.validate(width_mm, depth_mm, lens)
        tracker = ProgressTracker(progress_callback, cancel_check, "Lens mesh generation")

        segments = self._segments
        count = lenticule_count(width_mm, lens.pitch)
        radius, height = lens.radius, lens.height

        angles = -math.pi / 2 + np.arange(segments + 1) * (math.pi / segments)
        sin, cos = np.sin(angles), np.cos(angles)
        ring = np.column_stack([radius * sin, radius * cos - radius + height])
        profile = np.concatenate([
            np.column_stack([ring, np.zeros(segments + 1)]),
            np.column_stack([ring, np.full(segments + 1, depth_mm)]),
        ])
        ring_normals = np.column_stack([sin, cos, np.zeros(segments + 1)])
        normals = np.concatenate([ring_normals, ring_normals])
        triangles = _strip_triangles(segments)

        builder = MeshBuilder()
        for i in range(count):
            if i % _PROGRESS_EVERY == 0:
                tracker.check_cancelled()
                tracker.update(i / count)
            center = i * lens.pitch + lens.pitch / 2.0
            block = builder.add_vertices(profile + (center, 0.0, 0.0), normals)
            builder.add_triangles(block, triangles)

        builder.add_quad(
            np.array([
                [0.0, 0.0, 0.0],
                [width_mm, 0.0, 0.0],
                [width_mm, 0.0, depth_mm],
                [0.0, 0.0, depth_mm],
            ]),
            (0.0, -1.0, 0.0),
        )

        mesh = builder.build()
        logger.debug(
            "Lens mesh %.2fx%.2f mm: %d lenticules, %d vertices, %d triangles",
            width_mm, depth_mm, count, mesh.vertex_count, mesh.triangle_count,
        )
        tracker.finish()
        return mesh

    def validate(self, width_mm: float, depth_mm: float, lens: LensParameters) -> None:
        """Reject geometry that would produce an invalid lens.

        Raises:
            DegenerateLensGeometryError: On non-positive pitch, radius, height
                or region size, ``height <= radius``, fewer than one segment,
                or a region narrower than one lenticule.
        """
        if lens.pitch <= 0:
            raise DegenerateLensGeometryError(
                f"pitch must be positive, got {lens.pitch}", pitch=lens.pitch,
            )
        if lens.radius <= 0:
            raise DegenerateLensGeometryError(
                f"radius must be positive, got {lens.radius}", radius=lens.radius,
            )
        if lens.height <= lens.radius:
            raise DegenerateLensGeometryError(
                f"lens height {lens.height} mm must exceed radius {lens.radius} mm",
                height=lens.height,
                radius=lens.radius,
            )
        if self._segments < 1:
            raise DegenerateLensGeometryError(
                f"segments_around must be >= 1, got {self._segments}",
                segments_around=self._segments,
            )
        if width_mm <= 0 or depth_mm <= 0:
            raise DegenerateLensGeometryError(
                f"region size must be positive, got {width_mm} x {depth_mm} mm",
                width_mm=width_mm,
                depth_mm=depth_mm,
            )
        if lenticule_count(width_mm, lens.pitch) < 1:
            raise DegenerateLensGeometryError(
                f"pitch {lens.pitch} mm must be <= region width {width_mm} mm",
                pitch=lens.pitch,
                width_mm=width_mm,
            )
