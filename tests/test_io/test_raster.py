"""Tests for lenticular.io.raster."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import tifffile
from PIL import Image

from lenticular.io import (
    premultiply,
    read_raster,
    read_source_images,
    to_rgba8,
    unpremultiply,
    write_raster,
)


class TestAlpha:
    def test_premultiply(self):
        px = np.array([[[200, 100, 50, 128]]], dtype=np.uint8)
        np.testing.assert_array_equal(premultiply(px), [[[100, 50, 25, 128]]])

    def test_opaque_unchanged(self, opaque_raster):
        np.testing.assert_array_equal(premultiply(opaque_raster), opaque_raster)
        np.testing.assert_array_equal(unpremultiply(opaque_raster), opaque_raster)

    def test_transparent_colour_cleared(self):
        px = np.array([[[10, 20, 30, 0]]], dtype=np.uint8)
        np.testing.assert_array_equal(unpremultiply(px), [[[0, 0, 0, 0]]])

    def test_unpremultiply_inverts_within_rounding(self, translucent_raster):
        restored = premultiply(unpremultiply(translucent_raster))
        diff = np.abs(restored.astype(int) - translucent_raster.astype(int))
        assert diff.max() <= 1


class TestToRgba8:
    def test_gray_uint16(self):
        data = np.full((4, 5), 0xFF00, dtype=np.uint16)
        out = to_rgba8(data)
        assert out.shape == (4, 5, 4)
        assert (out[..., :3] == 255).all()
        assert (out[..., 3] == 255).all()

    def test_float_rgb(self):
        data = np.full((2, 2, 3), 0.5, dtype=np.float32)
        out = to_rgba8(data)
        assert (out[..., :3] == 128).all()

    def test_bad_shape(self):
        with pytest.raises(ValueError, match="Unsupported"):
            to_rgba8(np.zeros((2, 2, 2), dtype=np.uint8))


class TestTiff:
    def test_round_trip_keeps_premultiplied(self, tmp_path: Path, translucent_raster):
        path = tmp_path / "out.tif"
        write_raster(translucent_raster, path, dpi=300)
        np.testing.assert_array_equal(read_raster(path), translucent_raster)

    def test_resolution_written(self, tmp_path: Path, opaque_raster):
        path = tmp_path / "out.tif"
        write_raster(opaque_raster, path, dpi=300)
        with tifffile.TiffFile(str(path)) as tif:
            tags = tif.pages[0].tags
            assert tags["XResolution"].value == (300, 1)

    def test_gray_tiff_read_as_opaque(self, tmp_path: Path):
        path = tmp_path / "gray.tif"
        tifffile.imwrite(str(path), np.full((8, 6), 1000, dtype=np.uint16))
        out = read_raster(path)
        assert out.shape == (8, 6, 4)
        assert (out[..., 3] == 255).all()


class TestPillowFormats:
    def test_png_round_trip(self, tmp_path: Path, opaque_raster):
        path = tmp_path / "out.png"
        write_raster(opaque_raster, path, dpi=150)
        np.testing.assert_array_equal(read_raster(path), opaque_raster)

    def test_png_stores_straight_alpha(self, tmp_path: Path):
        px = np.array([[[100, 50, 25, 128]]], dtype=np.uint8)
        path = tmp_path / "alpha.png"
        write_raster(px, path)
        stored = np.asarray(Image.open(path))
        np.testing.assert_array_equal(stored[0, 0], [199, 100, 50, 128])

    def test_jpeg_drops_alpha(self, tmp_path: Path, opaque_raster):
        path = tmp_path / "out.jpg"
        write_raster(opaque_raster, path)
        with Image.open(path) as image:
            assert image.mode == "RGB"
        assert read_raster(path).shape == (24, 32, 4)


class TestSourceImages:
    def test_order_and_names(self, tmp_path: Path, opaque_raster):
        paths = []
        for name in ("b.png", "a.png"):
            write_raster(opaque_raster, tmp_path / name)
            paths.append(tmp_path / name)
        images = read_source_images(paths)
        assert [(i.order, i.name) for i in images] == [(0, "b.png"), (1, "a.png")]
        assert images[0].size == (32, 24)
