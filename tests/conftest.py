"""Shared test fixtures for lenticular."""

from __future__ import annotations

import numpy as np
import pytest

from lenticular.core.models import LensParameters, SourceImage


def solid_source(width: int, height: int, color, order: int = 0) -> SourceImage:
    """A single-colour premultiplied RGBA source frame."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:] = color
    return SourceImage(pixels, order=order, name=f"frame{order}")


@pytest.fixture
def lens40() -> LensParameters:
    """Standard 40 LPI lens with derived radius and angle."""
    return LensParameters.from_lpi(40)


@pytest.fixture
def lens20() -> LensParameters:
    return LensParameters.from_lpi(20)


@pytest.fixture
def make_source():
    """Factory fixture for solid-colour source frames."""
    return solid_source


@pytest.fixture
def random_sources() -> list[SourceImage]:
    """Three 64x48 frames of random opaque pixels."""
    rng = np.random.default_rng(42)
    frames = []
    for i in range(3):
        pixels = rng.integers(0, 256, (48, 64, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        frames.append(SourceImage(pixels, order=i))
    return frames
