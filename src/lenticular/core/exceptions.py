"""Exception classes for the lenticular core.

Every error carries a ``parameters`` dict naming the offending values so a
caller can point the user at what to adjust.
"""

from __future__ import annotations

from typing import Any


class LenticularError(Exception):
    """Base exception for all lenticular processing errors."""

    def __init__(self, message: str, **parameters: Any) -> None:
        super().__init__(message)
        self.parameters: dict[str, Any] = parameters


class EmptySourceSetError(LenticularError):
    """Raised when interlacing is requested with no source images."""

    def __init__(self) -> None:
        super().__init__("At least one source image is required")


class DimensionMismatchError(LenticularError):
    """Raised when source images differ in pixel size."""

    def __init__(
        self,
        expected: tuple[int, int],
        actual: tuple[int, int],
        index: int | None = None,
    ) -> None:
        where = f" (source {index})" if index is not None else ""
        super().__init__(
            f"Image dimensions do not match{where}: "
            f"expected {expected[0]}x{expected[1]}, got {actual[0]}x{actual[1]}",
            expected=expected,
            actual=actual,
            index=index,
        )
        self.expected = expected
        self.actual = actual
        self.index = index


class InvalidOutputSizeError(LenticularError):
    """Raised when the output raster has a non-positive width or height."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(
            f"Output size must be positive, got {width}x{height}",
            width=width,
            height=height,
        )
        self.width = width
        self.height = height


class DegenerateLayoutError(LenticularError):
    """Raised when no valid tile layout exists for the given sizes."""


class LayoutIterationLimitExceededError(LenticularError):
    """Raised when the boundary walk makes no progress or runs too long.

    Signals a configuration problem such as a lens pitch larger than the
    paper size.
    """


class CropOutOfBoundsError(LenticularError):
    """Raised when a planned tile rectangle falls outside the raster.

    Always an internal-consistency bug between planner and extractor.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        raster_size: tuple[int, int],
    ) -> None:
        super().__init__(
            f"Crop rectangle {rect} exceeds raster bounds "
            f"{raster_size[0]}x{raster_size[1]}",
            rect=rect,
            raster_size=raster_size,
        )
        self.rect = rect
        self.raster_size = raster_size


class DegenerateLensGeometryError(LenticularError):
    """Raised when lens parameters cannot produce a valid lens mesh."""


class DegenerateFrameGeometryError(LenticularError):
    """Raised when alignment-frame dimensions are not positive."""


class OperationCancelledError(LenticularError):
    """Raised when a long-running call is cancelled by its caller."""

    def __init__(self, operation: str, fraction_done: float = 0.0) -> None:
        super().__init__(
            f"{operation} cancelled at {fraction_done:.0%}",
            operation=operation,
            fraction_done=fraction_done,
        )
        self.operation = operation
        self.fraction_done = fraction_done
