"""Shared fixtures for tiling tests."""

from __future__ import annotations

import numpy as np
import pytest

from lenticular.core.models import BedSize, TileConfiguration
from lenticular.tiling import TileLayoutPlanner


@pytest.fixture
def planner() -> TileLayoutPlanner:
    return TileLayoutPlanner()


@pytest.fixture
def letter() -> TileConfiguration:
    """US Letter paper, portrait, edge to edge."""
    return TileConfiguration()


@pytest.fixture
def default_bed() -> BedSize:
    return BedSize.from_mm(220, 220)


@pytest.fixture
def large_bed() -> BedSize:
    return BedSize(24.0, 24.0)


@pytest.fixture
def gradient_raster() -> np.ndarray:
    """1100x850 raster (11x8.5 in at 100 dpi) with a unique colour per column/row."""
    height, width = 850, 1100
    raster = np.empty((height, width, 4), dtype=np.uint8)
    raster[..., 0] = (np.arange(width) % 256)[None, :]
    raster[..., 1] = (np.arange(height) % 256)[:, None]
    raster[..., 2] = 7
    raster[..., 3] = 255
    return raster
