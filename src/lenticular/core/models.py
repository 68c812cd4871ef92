"""Value types for the lenticular core module.

All models are immutable. Edits return new instances so that callers can
re-run the pure processing functions after every parameter change.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

import numpy as np

from lenticular.core.units import (
    MM_PER_INCH,
    lpi_from_pitch,
    pitch_from_lpi,
    viewing_angle_deg,
)

LPI_MIN = 10.0
LPI_MAX = 100.0
DEFAULT_LPI = 40.0
DEFAULT_LENS_HEIGHT_MM = 2.0

_PITCH_REL_TOLERANCE = 1e-6


# ---------------------------------------------------------------------------
# Lens
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LensParameters:
    """Physical parameters of the printed lenticular lens.

    ``pitch`` and ``lpi`` always describe the same lens (``pitch = 25.4 / lpi``).
    ``radius`` and ``viewing_angle`` follow the pitch and height automatically
    until they are overridden, after which they are locked to the given value.
    """

    lpi: float = DEFAULT_LPI
    pitch: float = MM_PER_INCH / DEFAULT_LPI
    radius: float = MM_PER_INCH / DEFAULT_LPI / 2.0
    height: float = DEFAULT_LENS_HEIGHT_MM
    viewing_angle: float = viewing_angle_deg(MM_PER_INCH / DEFAULT_LPI, DEFAULT_LENS_HEIGHT_MM)
    radius_locked: bool = False
    viewing_angle_locked: bool = False

    def __post_init__(self) -> None:
        """Validate the LPI range and the pitch/LPI relation."""
        if not LPI_MIN <= self.lpi <= LPI_MAX:
            raise ValueError(
                f"lpi must be between {LPI_MIN:g} and {LPI_MAX:g}, got {self.lpi}"
            )
        expected = pitch_from_lpi(self.lpi)
        if not math.isclose(self.pitch, expected, rel_tol=_PITCH_REL_TOLERANCE):
            raise ValueError(
                f"pitch {self.pitch} mm is inconsistent with lpi {self.lpi} "
                f"(expected {expected:.6f} mm)"
            )

    @classmethod
    def from_lpi(
        cls,
        lpi: float,
        height: float = DEFAULT_LENS_HEIGHT_MM,
        radius: float | None = None,
        viewing_angle: float | None = None,
    ) -> LensParameters:
        """Build parameters from an LPI value; explicit radius/angle are locked."""
        pitch = pitch_from_lpi(lpi)
        return cls(
            lpi=lpi,
            pitch=pitch,
            radius=pitch / 2.0 if radius is None else radius,
            height=height,
            viewing_angle=(
                viewing_angle_deg(pitch, height) if viewing_angle is None else viewing_angle
            ),
            radius_locked=radius is not None,
            viewing_angle_locked=viewing_angle is not None,
        )

    @classmethod
    def from_pitch(
        cls,
        pitch: float,
        height: float = DEFAULT_LENS_HEIGHT_MM,
        radius: float | None = None,
        viewing_angle: float | None = None,
    ) -> LensParameters:
        """Build parameters from a pitch in millimeters."""
        lens = cls.from_lpi(lpi_from_pitch(pitch), height, radius, viewing_angle)
        return dataclasses.replace(lens, pitch=pitch)

    @property
    def lenticules_per_mm(self) -> float:
        return 1.0 / self.pitch

    def with_lpi(self, lpi: float) -> LensParameters:
        """Return a copy with a new LPI; pitch follows."""
        return self._derive(lpi=lpi, pitch=pitch_from_lpi(lpi))

    def with_pitch(self, pitch: float) -> LensParameters:
        """Return a copy with a new pitch; LPI follows."""
        return self._derive(lpi=lpi_from_pitch(pitch), pitch=pitch)

    def with_height(self, height: float) -> LensParameters:
        return self._derive(height=height)

    def with_radius(self, radius: float | None) -> LensParameters:
        """Override the radius, or pass None to return to ``pitch / 2``."""
        if radius is None:
            return self._derive(radius_locked=False)
        return self._derive(radius=radius, radius_locked=True)

    def with_viewing_angle(self, viewing_angle: float | None) -> LensParameters:
        """Override the viewing angle, or pass None to compute it from geometry."""
        if viewing_angle is None:
            return self._derive(viewing_angle_locked=False)
        return self._derive(viewing_angle=viewing_angle, viewing_angle_locked=True)

    def _derive(self, **changes: object) -> LensParameters:
        """Apply changes and recompute every value that is not locked."""
        values = dataclasses.asdict(self)
        values.update(changes)
        if not values["radius_locked"]:
            values["radius"] = values["pitch"] / 2.0
        if not values["viewing_angle_locked"]:
            values["viewing_angle"] = viewing_angle_deg(values["pitch"], values["height"])
        return LensParameters(**values)  # type: ignore[arg-type]


LENS_PRESETS: dict[str, LensParameters] = {
    "Standard 40 LPI": LensParameters.from_lpi(40, height=2.0, radius=0.32, viewing_angle=40),
    "Fine Detail 60 LPI": LensParameters.from_lpi(60, height=1.5, radius=0.21, viewing_angle=35),
    "Wide Angle 20 LPI": LensParameters.from_lpi(20, height=3.0, radius=0.64, viewing_angle=50),
}


def get_preset(name: str) -> LensParameters:
    """Look up a built-in lens preset by name.

    Raises:
        KeyError: If no preset has this name.
    """
    try:
        return LENS_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown lens preset {name!r}. Available: {sorted(LENS_PRESETS)}"
        ) from None


# ---------------------------------------------------------------------------
# Rasters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class SourceImage:
    """One premultiplied RGBA8 source frame.

    The pixel buffer is copied and marked read-only on construction.
    """

    pixels: np.ndarray
    order: int = 0
    name: str = ""

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(
                f"Source image must have shape (height, width, 4), got {pixels.shape}"
            )
        if pixels.dtype != np.uint8:
            raise ValueError(f"Source image must be uint8, got {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Source image must not be empty")
        frozen = pixels.copy()
        frozen.flags.writeable = False
        object.__setattr__(self, "pixels", frozen)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)


@dataclass(frozen=True)
class OutputSpec:
    """Pixel size and resolution of the interlaced output."""

    width: int
    height: int
    dpi: int = 300

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive, got {self.dpi}")

    @classmethod
    def from_source(cls, image: SourceImage, dpi: int = 300) -> OutputSpec:
        """Size the output to match a source image."""
        return cls(width=image.width, height=image.height, dpi=dpi)

    @property
    def physical_width_in(self) -> float:
        return self.width / self.dpi

    @property
    def physical_height_in(self) -> float:
        return self.height / self.dpi

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height > 0 else 0.0

    def with_dpi(self, dpi: int) -> OutputSpec:
        """Change resolution while holding the physical size fixed."""
        if dpi <= 0:
            raise ValueError(f"dpi must be positive, got {dpi}")
        return OutputSpec(
            width=int(self.physical_width_in * dpi),
            height=int(self.physical_height_in * dpi),
            dpi=dpi,
        )

    def with_width(self, width: int, lock_aspect: bool = True) -> OutputSpec:
        if lock_aspect and self.height > 0 and self.width > 0:
            return OutputSpec(width, int(width / self.aspect_ratio), self.dpi)
        return OutputSpec(width, self.height, self.dpi)

    def with_height(self, height: int, lock_aspect: bool = True) -> OutputSpec:
        if lock_aspect and self.height > 0 and self.width > 0:
            return OutputSpec(int(height * self.aspect_ratio), height, self.dpi)
        return OutputSpec(self.width, height, self.dpi)

    def with_physical_width(self, inches: float, lock_aspect: bool = True) -> OutputSpec:
        return self.with_width(int(inches * self.dpi), lock_aspect)

    def with_physical_height(self, inches: float, lock_aspect: bool = True) -> OutputSpec:
        return self.with_height(int(inches * self.dpi), lock_aspect)


# ---------------------------------------------------------------------------
# Tiling
# ---------------------------------------------------------------------------


class TileMode(str, Enum):
    """How each cropped tile is finished for printing."""

    EDGE_TO_EDGE = "edge-to-edge"
    WITH_BLEED = "with-bleed"
    WITH_REGISTRATION = "with-registration"


class LayoutStrategy(str, Enum):
    """Paper orientation and the edge that absorbs the remainder tile."""

    PORTRAIT_REMAINDER_LEFT = "portrait-remainder-left"
    PORTRAIT_REMAINDER_RIGHT = "portrait-remainder-right"
    LANDSCAPE_REMAINDER_TOP = "landscape-remainder-top"
    LANDSCAPE_REMAINDER_BOTTOM = "landscape-remainder-bottom"

    @property
    def is_portrait(self) -> bool:
        return self in (
            LayoutStrategy.PORTRAIT_REMAINDER_LEFT,
            LayoutStrategy.PORTRAIT_REMAINDER_RIGHT,
        )


@dataclass(frozen=True)
class TileConfiguration:
    """Paper size and finishing options for printed tiles (inches)."""

    tile_width_in: float = 8.5
    tile_height_in: float = 11.0
    mode: TileMode = TileMode.EDGE_TO_EDGE
    bleed_amount_in: float = 0.125
    show_registration_marks: bool = True
    registration_margin_in: float = 0.25

    def __post_init__(self) -> None:
        """Coerce string modes and validate margins."""
        object.__setattr__(self, "mode", TileMode(self.mode))
        if self.bleed_amount_in < 0:
            raise ValueError(f"bleed_amount_in must be >= 0, got {self.bleed_amount_in}")
        if self.registration_margin_in < 0:
            raise ValueError(
                f"registration_margin_in must be >= 0, got {self.registration_margin_in}"
            )


@dataclass(frozen=True)
class BedSize:
    """Maximum 3D-printer build plate footprint, in inches."""

    width_in: float
    height_in: float

    @classmethod
    def from_mm(cls, width_mm: float, height_mm: float) -> BedSize:
        return cls(width_mm / MM_PER_INCH, height_mm / MM_PER_INCH)


@dataclass(frozen=True)
class PrinterBedRegion:
    """A block of tiles printed as one lens piece.

    Column and row ranges are inclusive-exclusive indices into the tile grid.
    """

    col_start: int
    col_end: int
    row_start: int
    row_end: int

    @property
    def columns(self) -> range:
        return range(self.col_start, self.col_end)

    @property
    def rows(self) -> range:
        return range(self.row_start, self.row_end)

    @property
    def tile_count(self) -> int:
        return len(self.columns) * len(self.rows)


@dataclass(frozen=True)
class TileLayout:
    """Lenticule-aligned cut positions and printer-bed grouping.

    ``vertical_boundaries`` and ``horizontal_boundaries`` hold interior cuts
    only; 0 and the image dimension are implicit end points.
    """

    image_width: int
    image_height: int
    dpi: int
    vertical_boundaries: tuple[int, ...]
    horizontal_boundaries: tuple[int, ...]
    strategy: LayoutStrategy
    regions: tuple[PrinterBedRegion, ...] = field(default_factory=tuple)

    @property
    def column_edges(self) -> tuple[int, ...]:
        return (0, *self.vertical_boundaries, self.image_width)

    @property
    def row_edges(self) -> tuple[int, ...]:
        return (0, *self.horizontal_boundaries, self.image_height)

    @property
    def num_columns(self) -> int:
        return len(self.vertical_boundaries) + 1

    @property
    def num_rows(self) -> int:
        return len(self.horizontal_boundaries) + 1

    def tile_rect(self, row: int, column: int) -> tuple[int, int, int, int]:
        """Pixel rectangle ``(x0, y0, x1, y1)`` of one grid cell."""
        cols, rows = self.column_edges, self.row_edges
        return (cols[column], rows[row], cols[column + 1], rows[row + 1])

    def iter_tiles(self) -> Iterator[tuple[int, int, tuple[int, int, int, int]]]:
        """Yield ``(row, column, rect)`` for every cell in row-major order."""
        for row in range(self.num_rows):
            for column in range(self.num_columns):
                yield row, column, self.tile_rect(row, column)

    def region_rect(self, region: PrinterBedRegion) -> tuple[int, int, int, int]:
        cols, rows = self.column_edges, self.row_edges
        return (
            cols[region.col_start],
            rows[region.row_start],
            cols[region.col_end],
            rows[region.row_end],
        )

    def region_size_in(self, region: PrinterBedRegion) -> tuple[float, float]:
        x0, y0, x1, y1 = self.region_rect(region)
        return ((x1 - x0) / self.dpi, (y1 - y0) / self.dpi)

    def region_size_mm(self, region: PrinterBedRegion) -> tuple[float, float]:
        width_in, height_in = self.region_size_in(region)
        return (width_in * MM_PER_INCH, height_in * MM_PER_INCH)


# ---------------------------------------------------------------------------
# Meshes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Mesh:
    """Indexed triangle mesh in millimeters.

    Attributes:
        vertices: (n, 3) float32 positions.
        normals: (n, 3) float32 unit normals, parallel to ``vertices``.
        triangles: (m, 3) uint32 vertex index triples.
    """

    vertices: np.ndarray
    normals: np.ndarray
    triangles: np.ndarray

    def __post_init__(self) -> None:
        vertices = np.ascontiguousarray(self.vertices, dtype=np.float32).reshape(-1, 3)
        normals = np.ascontiguousarray(self.normals, dtype=np.float32).reshape(-1, 3)
        triangles = np.ascontiguousarray(self.triangles, dtype=np.uint32).reshape(-1, 3)
        if normals.shape != vertices.shape:
            raise ValueError(
                f"normals shape {normals.shape} does not match vertices {vertices.shape}"
            )
        if triangles.size and int(triangles.max()) >= len(vertices):
            raise ValueError(
                f"triangle index {int(triangles.max())} out of range "
                f"for {len(vertices)} vertices"
            )
        for name, arr in (("vertices", vertices), ("normals", normals), ("triangles", triangles)):
            arr.flags.writeable = False
            object.__setattr__(self, name, arr)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])

    @property
    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """(min_corner, max_corner) of the vertex positions."""
        if self.vertex_count == 0:
            zero = np.zeros(3, dtype=np.float32)
            return zero, zero
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    @classmethod
    def concatenate(cls, meshes: list[Mesh]) -> Mesh:
        """Join meshes into one, offsetting triangle indices."""
        offset = 0
        triangles = []
        for mesh in meshes:
            triangles.append(mesh.triangles.astype(np.int64) + offset)
            offset += mesh.vertex_count
        if not meshes:
            return cls(np.empty((0, 3)), np.empty((0, 3)), np.empty((0, 3)))
        return cls(
            vertices=np.concatenate([m.vertices for m in meshes]),
            normals=np.concatenate([m.normals for m in meshes]),
            triangles=np.concatenate(triangles),
        )

    def to_trimesh(self):  # noqa: ANN201 - trimesh is imported lazily
        """Convert to a ``trimesh.Trimesh`` without merging or reordering."""
        import trimesh

        return trimesh.Trimesh(
            vertices=self.vertices,
            faces=self.triangles,
            vertex_normals=self.normals,
            process=False,
        )
