"""Tests for lenticular.interlace.interlacer."""

from __future__ import annotations

import numpy as np
import pytest

from lenticular.core.exceptions import (
    DimensionMismatchError,
    EmptySourceSetError,
    InvalidOutputSizeError,
    OperationCancelledError,
)
from lenticular.core.models import OutputSpec
from lenticular.interlace import RasterInterlacer, column_source_indices

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)


class TestColumnSourceIndices:
    def test_two_sources_at_15_px_per_lenticule(self):
        indices = column_source_indices(30, 300, 20, 2)
        expected = [0] * 8 + [1] * 7 + [0] * 8 + [1] * 7
        np.testing.assert_array_equal(indices, expected)

    def test_fractional_lenticule(self):
        # 7.5 px per lenticule, 3 sources
        indices = column_source_indices(15, 300, 40, 3)
        assert indices.min() == 0
        assert indices.max() == 2
        assert indices[0] == 0
        assert indices[8] == 0

    def test_single_source(self):
        np.testing.assert_array_equal(column_source_indices(10, 300, 40, 1), [0] * 10)

    def test_no_sources(self):
        with pytest.raises(EmptySourceSetError):
            column_source_indices(10, 300, 40, 0)


class TestInterlace:
    def test_two_frame_scenario(self, make_source):
        sources = [make_source(1920, 1080, RED, 0), make_source(1920, 1080, BLUE, 1)]
        result = RasterInterlacer().interlace(sources, 20, OutputSpec(1920, 1080, 300))

        assert result.shape == (1080, 1920, 4)
        assert result.dtype == np.uint8
        assert tuple(result[0, 0]) == RED
        assert tuple(result[540, 14]) == BLUE
        assert tuple(result[1079, 15]) == RED

    def test_every_column_from_one_source(self, make_source):
        sources = [make_source(60, 10, RED, 0), make_source(60, 10, BLUE, 1)]
        result = RasterInterlacer(batch_columns=7).interlace(sources, 20, OutputSpec(60, 10, 300))
        indices = column_source_indices(60, 300, 20, 2)
        for x, index in enumerate(indices):
            expected = RED if index == 0 else BLUE
            assert (result[:, x] == expected).all()

    def test_sources_sorted_by_order(self, make_source):
        sources = [make_source(30, 5, BLUE, 1), make_source(30, 5, RED, 0)]
        result = RasterInterlacer().interlace(sources, 20, OutputSpec(30, 5, 300))
        assert tuple(result[0, 0]) == RED

    def test_idempotent(self, random_sources):
        interlacer = RasterInterlacer(batch_columns=16)
        spec = OutputSpec(64, 48, 300)
        first = interlacer.interlace(random_sources, 37.5, spec)
        second = interlacer.interlace(random_sources, 37.5, spec)
        np.testing.assert_array_equal(first, second)

    def test_sources_not_modified(self, random_sources):
        before = [s.pixels.copy() for s in random_sources]
        RasterInterlacer().interlace(random_sources, 40, OutputSpec(64, 48, 300))
        for original, source in zip(before, random_sources):
            np.testing.assert_array_equal(original, source.pixels)

    def test_resamples_to_output_size(self, make_source):
        sources = [make_source(40, 20, RED, 0), make_source(40, 20, BLUE, 1)]
        result = RasterInterlacer().interlace(sources, 20, OutputSpec(80, 40, 300))
        assert result.shape == (40, 80, 4)
        assert tuple(result[20, 0]) == RED


class TestInterlaceErrors:
    def test_empty_sources(self):
        with pytest.raises(EmptySourceSetError):
            RasterInterlacer().interlace([], 40, OutputSpec(10, 10))

    def test_dimension_mismatch(self, make_source):
        sources = [make_source(10, 10, RED, 0), make_source(12, 10, BLUE, 1)]
        with pytest.raises(DimensionMismatchError) as exc_info:
            RasterInterlacer().interlace(sources, 40, OutputSpec(10, 10))
        assert exc_info.value.expected == (10, 10)
        assert exc_info.value.actual == (12, 10)
        assert exc_info.value.index == 1

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10)])
    def test_invalid_output_size(self, make_source, width, height):
        with pytest.raises(InvalidOutputSizeError):
            RasterInterlacer().interlace(
                [make_source(10, 10, RED)], 40, OutputSpec(width, height),
            )

    def test_batch_columns_must_be_positive(self):
        with pytest.raises(ValueError):
            RasterInterlacer(batch_columns=0)


class TestProgressAndCancellation:
    def test_progress_monotonic_and_complete(self, random_sources):
        seen: list[float] = []
        RasterInterlacer(batch_columns=10).interlace(
            random_sources, 40, OutputSpec(64, 48, 300), progress_callback=seen.append,
        )
        assert seen
        assert all(b >= a for a, b in zip(seen, seen[1:]))
        assert seen[-1] == 1.0

    def test_cancel_immediately(self, random_sources):
        with pytest.raises(OperationCancelledError):
            RasterInterlacer().interlace(
                random_sources, 40, OutputSpec(64, 48, 300), cancel_check=lambda: True,
            )

    def test_cancel_mid_run(self, random_sources):
        calls = {"n": 0}

        def cancel_after_a_few() -> bool:
            calls["n"] += 1
            return calls["n"] > 5

        seen: list[float] = []
        with pytest.raises(OperationCancelledError):
            RasterInterlacer(batch_columns=8).interlace(
                random_sources, 40, OutputSpec(64, 48, 300),
                progress_callback=seen.append,
                cancel_check=cancel_after_a_few,
            )
        assert seen and seen[-1] < 1.0
