"""Shared fixtures for print job tests."""

from __future__ import annotations

import pytest

from lenticular.core.models import LensParameters, OutputSpec, TileConfiguration
from lenticular.job import PrintJob

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def letter_job() -> PrintJob:
    """11x8.5 in landscape print at 100 dpi on portrait letter paper, 20 LPI."""
    return PrintJob(
        lens=LensParameters.from_lpi(20),
        output=OutputSpec(1100, 850, 100),
        tiling=TileConfiguration(),
        strategy="portrait-remainder-right",
        segments_around=4,
    )


@pytest.fixture
def two_frames(make_source):
    return [make_source(1100, 850, RED, 0), make_source(1100, 850, BLUE, 1)]
