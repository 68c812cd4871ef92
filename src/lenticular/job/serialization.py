"""YAML serialization for PrintJob.

Requires pyyaml. Raises ImportError with clear install instructions
if pyyaml is not available.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from lenticular.core.models import (
    BedSize,
    LensParameters,
    OutputSpec,
    TileConfiguration,
)
from lenticular.job.models import PrintJob


def _require_yaml() -> Any:
    """Import and return the yaml module, or raise a helpful error."""
    try:
        import yaml

        return yaml
    except ImportError:
        raise ImportError(
            "pyyaml is required for print job serialization. "
            "Install it with: pip install pyyaml"
        ) from None


def job_to_dict(job: PrintJob) -> dict[str, Any]:
    """Convert a PrintJob to plain YAML-friendly types."""
    lens: dict[str, Any] = {"lpi": job.lens.lpi, "height": job.lens.height}
    if job.lens.radius_locked:
        lens["radius"] = job.lens.radius
    if job.lens.viewing_angle_locked:
        lens["viewing_angle"] = job.lens.viewing_angle

    data: dict[str, Any] = {
        "lens": lens,
        "output": {
            "width": job.output.width,
            "height": job.output.height,
            "dpi": job.output.dpi,
        },
        "tiling": {
            "tile_width_in": job.tiling.tile_width_in,
            "tile_height_in": job.tiling.tile_height_in,
            "mode": job.tiling.mode.value,
            "bleed_amount_in": job.tiling.bleed_amount_in,
            "show_registration_marks": job.tiling.show_registration_marks,
            "registration_margin_in": job.tiling.registration_margin_in,
        },
        "bed": {"width_in": job.bed.width_in, "height_in": job.bed.height_in},
        "mesh": {
            "segments_around": job.segments_around,
            "frame_width_mm": job.frame_width_mm,
            "frame_height_mm": job.frame_height_mm,
        },
    }
    if job.strategy is not None:
        data["strategy"] = job.strategy.value
    return data


def job_from_dict(data: dict[str, Any]) -> PrintJob:
    """Build a PrintJob from the structure written by ``job_to_dict``.

    Raises:
        ValueError: If a required section is missing or malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("Print job file must contain a mapping")
    for section in ("lens", "output"):
        if section not in data:
            raise ValueError(f"Print job is missing the '{section}' section")

    lens_data = data["lens"]
    if "lpi" in lens_data:
        lens = LensParameters.from_lpi(
            float(lens_data["lpi"]),
            height=float(lens_data.get("height", 2.0)),
            radius=lens_data.get("radius"),
            viewing_angle=lens_data.get("viewing_angle"),
        )
    elif "pitch" in lens_data:
        lens = LensParameters.from_pitch(
            float(lens_data["pitch"]),
            height=float(lens_data.get("height", 2.0)),
            radius=lens_data.get("radius"),
            viewing_angle=lens_data.get("viewing_angle"),
        )
    else:
        raise ValueError("Lens section needs either 'lpi' or 'pitch'")

    out = data["output"]
    output = OutputSpec(
        width=int(out["width"]),
        height=int(out["height"]),
        dpi=int(out.get("dpi", 300)),
    )

    tiling = TileConfiguration(**data.get("tiling", {}))
    bed_data = data.get("bed")
    mesh_data = data.get("mesh", {})

    kwargs: dict[str, Any] = {
        "lens": lens,
        "output": output,
        "tiling": tiling,
        "strategy": data.get("strategy"),
    }
    if bed_data is not None:
        if "width_mm" in bed_data:
            kwargs["bed"] = BedSize.from_mm(bed_data["width_mm"], bed_data["height_mm"])
        else:
            kwargs["bed"] = BedSize(bed_data["width_in"], bed_data["height_in"])
    for key in ("segments_around", "frame_width_mm", "frame_height_mm"):
        if key in mesh_data:
            kwargs[key] = mesh_data[key]
    return PrintJob(**kwargs)


def job_to_yaml(job: PrintJob, path: Path) -> None:
    """Serialize a PrintJob to a YAML file.

    Args:
        job: The print job to serialize.
        path: File path to write.
    """
    yaml = _require_yaml()
    with open(path, "w") as f:
        yaml.dump(job_to_dict(job), f, default_flow_style=False, sort_keys=False)


def job_from_yaml(path: Path) -> PrintJob:
    """Deserialize a PrintJob from a YAML file.

    Args:
        path: File path to read.

    Returns:
        Reconstructed PrintJob.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the YAML is malformed or missing required fields.
    """
    yaml = _require_yaml()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Print job file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    try:
        return job_from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid print job file {path}: {e}") from e
