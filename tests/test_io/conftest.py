"""Shared fixtures for IO module tests."""

from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def opaque_raster() -> np.ndarray:
    rng = np.random.default_rng(7)
    raster = rng.integers(0, 256, (24, 32, 4), dtype=np.uint8)
    raster[..., 3] = 255
    return raster


@pytest.fixture
def translucent_raster() -> np.ndarray:
    """Premultiplied raster with partial alpha (colour never exceeds alpha)."""
    rng = np.random.default_rng(11)
    alpha = rng.integers(0, 256, (24, 32, 1), dtype=np.uint16)
    color = rng.integers(0, 256, (24, 32, 3), dtype=np.uint16) * alpha // 255
    return np.concatenate([color, alpha], axis=-1).astype(np.uint8)
