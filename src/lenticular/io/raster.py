"""Raster file reading and writing via tifffile (TIFF) and Pillow (PNG/JPEG).

In memory, rasters are (H, W, 4) uint8 premultiplied RGBA. TIFF files carry
an associated (premultiplied) alpha sample; other formats store straight
alpha and are converted on the way in and out.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import tifffile
from PIL import Image

from lenticular.core.models import SourceImage

TIFF_SUFFIXES = frozenset({".tif", ".tiff"})
IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".bmp", *TIFF_SUFFIXES})

_EXTRASAMPLE_ASSOCALPHA = 1


def premultiply(rgba: np.ndarray) -> np.ndarray:
    """Convert straight-alpha RGBA8 to premultiplied RGBA8."""
    out = rgba.astype(np.uint16)
    alpha = out[..., 3:4]
    out[..., :3] = (out[..., :3] * alpha + 127) // 255
    return out.astype(np.uint8)


def unpremultiply(rgba: np.ndarray) -> np.ndarray:
    """Convert premultiplied RGBA8 to straight-alpha RGBA8."""
    out = rgba.astype(np.uint32)
    alpha = out[..., 3:4]
    safe = np.where(alpha == 0, 1, alpha)
    color = (out[..., :3] * 255 + safe // 2) // safe
    out[..., :3] = np.where(alpha == 0, 0, np.minimum(color, 255))
    return out.astype(np.uint8)


def to_rgba8(data: np.ndarray) -> np.ndarray:
    """Normalize gray, RGB or RGBA data of any integer/float type to RGBA8.

    Alpha, if present, is returned unchanged (no premultiplication).

    Raises:
        ValueError: If the array shape is not an image.
    """
    if data.dtype == np.uint16:
        data = (data >> 8).astype(np.uint8)
    elif np.issubdtype(data.dtype, np.floating):
        data = np.clip(np.rint(data * 255.0), 0, 255).astype(np.uint8)
    elif data.dtype != np.uint8:
        data = np.clip(data, 0, 255).astype(np.uint8)

    if data.ndim == 2:
        data = np.stack([data, data, data], axis=-1)
    if data.ndim != 3 or data.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported image shape: {data.shape}")
    if data.shape[2] == 3:
        alpha = np.full(data.shape[:2] + (1,), 255, dtype=np.uint8)
        data = np.concatenate([data, alpha], axis=-1)
    return np.ascontiguousarray(data)


def read_raster(path: Path) -> np.ndarray:
    """Read an image file as premultiplied RGBA8.

    Args:
        path: Path to a TIFF, PNG, JPEG or BMP file.

    Returns:
        (H, W, 4) uint8 array.
    """
    path = Path(path)
    if path.suffix.lower() in TIFF_SUFFIXES:
        with tifffile.TiffFile(str(path)) as tif:
            page = tif.pages[0]
            data = page.asarray()
            extrasamples = tuple(int(s) for s in (page.extrasamples or ()))
        rgba = to_rgba8(data)
        if data.ndim == 3 and data.shape[2] == 4 and _EXTRASAMPLE_ASSOCALPHA in extrasamples:
            return rgba
        return premultiply(rgba)

    with Image.open(path) as image:
        rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    return premultiply(rgba)


def read_source_images(paths: list[Path]) -> list[SourceImage]:
    """Load files as SourceImages, ordered as given."""
    return [
        SourceImage(read_raster(p), order=i, name=Path(p).name)
        for i, p in enumerate(paths)
    ]


def write_raster(raster: np.ndarray, path: Path, dpi: int | None = None) -> None:
    """Write a premultiplied RGBA8 raster to disk.

    TIFF output keeps premultiplied data and records the resolution; other
    formats are written with straight alpha through Pillow.
    """
    path = Path(path)
    if path.suffix.lower() in TIFF_SUFFIXES:
        kwargs: dict = {"photometric": "rgb", "extrasamples": ("assocalpha",)}
        if dpi:
            kwargs["resolution"] = (dpi, dpi)
            kwargs["resolutionunit"] = "INCH"
        tifffile.imwrite(str(path), np.ascontiguousarray(raster), **kwargs)
        return

    image = Image.fromarray(unpremultiply(raster))
    if path.suffix.lower() in (".jpg", ".jpeg"):
        image = image.convert("RGB")
    save_kwargs = {"dpi": (dpi, dpi)} if dpi else {}
    image.save(path, **save_kwargs)
