"""AlignmentFrameBuilder — a printed border for registering the lens."""

from __future__ import annotations

from lenticular.core.exceptions import DegenerateFrameGeometryError
from lenticular.core.models import Mesh
from lenticular.mesh.builder import MeshBuilder

DEFAULT_FRAME_WIDTH_MM = 5.0
DEFAULT_FRAME_HEIGHT_MM = 0.6


class AlignmentFrameBuilder:
    """Build a rectangular frame whose opening matches a region footprint.

    The frame is four separate closed boxes (front, back, left, right) so
    that no vertex is shared between strips.
    """

    def build(
        self,
        width_mm: float,
        depth_mm: float,
        frame_width_mm: float = DEFAULT_FRAME_WIDTH_MM,
        frame_height_mm: float = DEFAULT_FRAME_HEIGHT_MM,
    ) -> Mesh:
        """Generate the frame around ``[0, width_mm] x [0, depth_mm]``.

        Raises:
            DegenerateFrameGeometryError: If any dimension is not positive.
        """
        for name, value in (
            ("width_mm", width_mm),
            ("depth_mm", depth_mm),
            ("frame_width_mm", frame_width_mm),
            ("frame_height_mm", frame_height_mm),
        ):
            if value <= 0:
                raise DegenerateFrameGeometryError(
                    f"{name} must be positive, got {value}", **{name: value},
                )

        fw, fh = frame_width_mm, frame_height_mm
        builder = MeshBuilder()
        # Front and back strips span the full outer width, including corners
        builder.add_box((-fw, 0.0, -fw), (width_mm + fw, fh, 0.0))
        builder.add_box((-fw, 0.0, depth_mm), (width_mm + fw, fh, depth_mm + fw))
        # Left and right strips fill the gap between them
        builder.add_box((-fw, 0.0, 0.0), (0.0, fh, depth_mm))
        builder.add_box((width_mm, 0.0, 0.0), (width_mm + fw, fh, depth_mm))
        return builder.build()
