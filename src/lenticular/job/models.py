"""Data models for a complete print job."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from lenticular.core.models import (
    BedSize,
    LayoutStrategy,
    LensParameters,
    OutputSpec,
    TileConfiguration,
)
from lenticular.mesh.frame import DEFAULT_FRAME_HEIGHT_MM, DEFAULT_FRAME_WIDTH_MM
from lenticular.mesh.lens import DEFAULT_SEGMENTS_AROUND

# A common 220 x 220 mm consumer printer bed
DEFAULT_BED = BedSize.from_mm(220.0, 220.0)


@dataclass
class PrintJob:
    """Everything needed to turn source frames into print artifacts."""

    lens: LensParameters
    output: OutputSpec
    tiling: TileConfiguration = field(default_factory=TileConfiguration)
    bed: BedSize = DEFAULT_BED
    strategy: LayoutStrategy | None = None
    segments_around: int = DEFAULT_SEGMENTS_AROUND
    frame_width_mm: float = DEFAULT_FRAME_WIDTH_MM
    frame_height_mm: float = DEFAULT_FRAME_HEIGHT_MM

    def __post_init__(self) -> None:
        if self.strategy is not None:
            self.strategy = LayoutStrategy(self.strategy)
        if self.segments_around < 1:
            raise ValueError(f"segments_around must be >= 1, got {self.segments_around}")

    def to_yaml(self, path: Path) -> None:
        """Serialize this job to a YAML file."""
        from lenticular.job.serialization import job_to_yaml

        job_to_yaml(self, path)

    @classmethod
    def from_yaml(cls, path: Path) -> PrintJob:
        """Deserialize a PrintJob from a YAML file."""
        from lenticular.job.serialization import job_from_yaml

        return job_from_yaml(path)
