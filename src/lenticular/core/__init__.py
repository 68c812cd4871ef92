"""lenticular core — value types, units, errors and progress helpers."""

from lenticular.core.exceptions import (
    CropOutOfBoundsError,
    DegenerateFrameGeometryError,
    DegenerateLayoutError,
    DegenerateLensGeometryError,
    DimensionMismatchError,
    EmptySourceSetError,
    InvalidOutputSizeError,
    LayoutIterationLimitExceededError,
    LenticularError,
    OperationCancelledError,
)
from lenticular.core.models import (
    LENS_PRESETS,
    BedSize,
    LayoutStrategy,
    LensParameters,
    Mesh,
    OutputSpec,
    PrinterBedRegion,
    SourceImage,
    TileConfiguration,
    TileLayout,
    TileMode,
    get_preset,
)
from lenticular.core.progress import ProgressTracker

__all__ = [
    "BedSize",
    "LENS_PRESETS",
    "LayoutStrategy",
    "LensParameters",
    "Mesh",
    "OutputSpec",
    "PrinterBedRegion",
    "ProgressTracker",
    "SourceImage",
    "TileConfiguration",
    "TileLayout",
    "TileMode",
    "get_preset",
    "LenticularError",
    "EmptySourceSetError",
    "DimensionMismatchError",
    "InvalidOutputSizeError",
    "DegenerateLayoutError",
    "LayoutIterationLimitExceededError",
    "CropOutOfBoundsError",
    "DegenerateLensGeometryError",
    "DegenerateFrameGeometryError",
    "OperationCancelledError",
]
