"""Aspect-fit resampling of source frames into the output canvas."""

from __future__ import annotations

import numpy as np
from skimage.transform import resize

LETTERBOX_FILL = (0, 0, 0, 255)


def fit_rect(
    source_size: tuple[int, int],
    canvas_size: tuple[int, int],
) -> tuple[int, int, int, int]:
    """Placement of an aspect-fit source inside a canvas.

    Args:
        source_size: (width, height) of the source in pixels.
        canvas_size: (width, height) of the canvas in pixels.

    Returns:
        (x, y, width, height) of the fitted image within the canvas.
    """
    src_w, src_h = source_size
    out_w, out_h = canvas_size
    source_aspect = src_w / src_h
    target_aspect = out_w / out_h

    if source_aspect > target_aspect:
        # Wider than the canvas: fit width, letterbox top and bottom
        dest_w = out_w
        dest_h = max(1, min(out_h, int(out_w / source_aspect)))
        return (0, (out_h - dest_h) // 2, dest_w, dest_h)

    dest_w = max(1, min(out_w, int(out_h * source_aspect)))
    dest_h = out_h
    return ((out_w - dest_w) // 2, 0, dest_w, dest_h)


def fit_to_canvas(
    pixels: np.ndarray,
    canvas_size: tuple[int, int],
    fill: tuple[int, int, int, int] = LETTERBOX_FILL,
) -> np.ndarray:
    """Resample an RGBA8 image into a canvas without stretching.

    Args:
        pixels: (H, W, 4) uint8 premultiplied RGBA source.
        canvas_size: (width, height) of the output canvas.
        fill: Premultiplied RGBA colour for the letterbox bars.

    Returns:
        New (height, width, 4) uint8 array.
    """
    out_w, out_h = canvas_size
    src_h, src_w = pixels.shape[:2]

    if (src_w, src_h) == (out_w, out_h):
        return np.array(pixels, dtype=np.uint8, copy=True)

    x, y, dest_w, dest_h = fit_rect((src_w, src_h), canvas_size)

    scaled = resize(
        pixels.astype(np.float64),
        (dest_h, dest_w, 4),
        order=1,
        mode="edge",
        anti_aliasing=dest_w < src_w or dest_h < src_h,
        preserve_range=True,
    )

    canvas = np.empty((out_h, out_w, 4), dtype=np.uint8)
    canvas[:] = fill
    canvas[y:y + dest_h, x:x + dest_w] = np.clip(np.rint(scaled), 0, 255).astype(np.uint8)
    return canvas
