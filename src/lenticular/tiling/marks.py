"""Registration crosshairs and tile labels for printed tiles."""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

MARK_COLOR = (0, 0, 0, 255)
PAPER_COLOR = (255, 255, 255, 255)


def draw_crosshair(
    canvas: np.ndarray,
    center: tuple[int, int],
    arm: int,
    thickness: int = 1,
    color: tuple[int, int, int, int] = MARK_COLOR,
) -> None:
    """Draw a ``+`` shaped mark in place, clipped to the canvas.

    Args:
        canvas: (H, W, 4) uint8 array, modified in place.
        center: (x, y) pixel position of the mark.
        arm: Half-length of each stroke in pixels.
        thickness: Stroke width in pixels.
        color: Premultiplied RGBA colour.
    """
    height, width = canvas.shape[:2]
    cx, cy = center
    half = thickness // 2
    x0, x1 = max(0, cx - arm), min(width, cx + arm + 1)
    y0, y1 = max(0, cy - arm), min(height, cy + arm + 1)
    canvas[max(0, cy - half):min(height, cy - half + thickness), x0:x1] = color
    canvas[y0:y1, max(0, cx - half):min(width, cx - half + thickness)] = color


def draw_corner_marks(canvas: np.ndarray, margin: int, dpi: int) -> None:
    """Draw a crosshair centred in each of the four corner margin squares."""
    if margin < 3:
        return
    height, width = canvas.shape[:2]
    arm = max(1, int(margin * 0.4))
    thickness = max(1, dpi // 150)
    offset = margin // 2
    for cx in (offset, width - 1 - offset):
        for cy in (offset, height - 1 - offset):
            draw_crosshair(canvas, (cx, cy), arm, thickness)


def draw_label(
    canvas: np.ndarray,
    text: str,
    position: tuple[int, int],
    color: tuple[int, int, int, int] = MARK_COLOR,
) -> np.ndarray:
    """Burn a text label into an RGBA8 canvas.

    Returns:
        A new array with the label drawn.
    """
    image = Image.fromarray(np.ascontiguousarray(canvas))
    ImageDraw.Draw(image).text(position, text, fill=color)
    return np.asarray(image, dtype=np.uint8).copy()


def tile_label(row: int, column: int) -> str:
    """Human-readable, 1-based tile label such as ``R1C2``."""
    return f"R{row + 1}C{column + 1}"
