"""Mesh export through trimesh (binary STL, OBJ, PLY)."""

from __future__ import annotations

from pathlib import Path

from lenticular.core.models import Mesh

SUPPORTED_MESH_SUFFIXES = frozenset({".stl", ".obj", ".ply"})


def export_mesh(mesh: Mesh, path: Path) -> Path:
    """Write a mesh to disk; the format follows the file suffix.

    Raises:
        ValueError: If the suffix is not a supported mesh format.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_MESH_SUFFIXES:
        raise ValueError(
            f"Unsupported mesh format {suffix!r}. "
            f"Supported: {sorted(SUPPORTED_MESH_SUFFIXES)}"
        )
    mesh.to_trimesh().export(str(path), file_type=suffix.lstrip("."))
    return path
