"""Tests for lenticular.core.exceptions."""

import pytest

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


class TestExceptionHierarchy:
    def test_all_inherit_from_lenticular_error(self):
        for exc_cls in (
            EmptySourceSetError, DimensionMismatchError, InvalidOutputSizeError,
            DegenerateLayoutError, LayoutIterationLimitExceededError,
            CropOutOfBoundsError, DegenerateLensGeometryError,
            DegenerateFrameGeometryError, OperationCancelledError,
        ):
            assert issubclass(exc_cls, LenticularError)

    def test_catch_all_with_base(self):
        with pytest.raises(LenticularError):
            raise EmptySourceSetError()


class TestParameters:
    def test_dimension_mismatch(self):
        exc = DimensionMismatchError((100, 50), (80, 50), index=2)
        assert "100x50" in str(exc)
        assert "80x50" in str(exc)
        assert "source 2" in str(exc)
        assert exc.parameters == {"expected": (100, 50), "actual": (80, 50), "index": 2}

    def test_invalid_output_size(self):
        exc = InvalidOutputSizeError(0, 10)
        assert exc.width == 0
        assert exc.parameters["height"] == 10

    def test_crop_out_of_bounds(self):
        exc = CropOutOfBoundsError((0, 0, 120, 50), (100, 50))
        assert "(0, 0, 120, 50)" in str(exc)
        assert exc.raster_size == (100, 50)

    def test_free_form_parameters(self):
        exc = DegenerateLayoutError("too small", image_width=10, min_tile_in=0.5)
        assert str(exc) == "too small"
        assert exc.parameters == {"image_width": 10, "min_tile_in": 0.5}

    def test_cancelled_message(self):
        exc = OperationCancelledError("Interlacing", 0.25)
        assert "Interlacing" in str(exc)
        assert "25%" in str(exc)
        assert exc.fraction_done == 0.25
