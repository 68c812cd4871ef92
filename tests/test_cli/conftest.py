"""Shared fixtures for CLI module tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from click.testing import CliRunner

from lenticular.io import write_raster


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def frame_files(tmp_path: Path) -> list[Path]:
    """Two 300x200 PNG frames, red and blue."""
    paths = []
    for i, color in enumerate(((255, 0, 0, 255), (0, 0, 255, 255))):
        pixels = np.empty((200, 300, 4), dtype=np.uint8)
        pixels[:] = color
        path = tmp_path / f"frame{i}.png"
        write_raster(pixels, path)
        paths.append(path)
    return paths


@pytest.fixture
def interlaced_tif(tmp_path: Path) -> Path:
    """1100x850 interlaced-looking raster (11x8.5 in at 100 dpi)."""
    raster = np.zeros((850, 1100, 4), dtype=np.uint8)
    raster[..., 3] = 255
    raster[:, ::5, 0] = 255
    path = tmp_path / "interlaced.tif"
    write_raster(raster, path, dpi=100)
    return path
