"""Unit conversions shared by the raster, layout and mesh code.

Pixels and inches are bridged only by an explicit ``dpi``; inches and
millimeters by the fixed ``MM_PER_INCH``; lenses by their pitch or LPI.
"""

from __future__ import annotations

import math

MM_PER_INCH = 25.4


def pitch_from_lpi(lpi: float) -> float:
    """Lenticule pitch in millimeters for a lines-per-inch value."""
    if lpi <= 0:
        raise ValueError(f"lpi must be positive, got {lpi}")
    return MM_PER_INCH / lpi


def lpi_from_pitch(pitch: float) -> float:
    """Lines per inch for a lenticule pitch in millimeters."""
    if pitch <= 0:
        raise ValueError(f"pitch must be positive, got {pitch}")
    return MM_PER_INCH / pitch


def pixels_per_lenticule(dpi: float, lpi: float) -> float:
    """Number of output pixels under one lenticule (real valued)."""
    if dpi <= 0 or lpi <= 0:
        raise ValueError(f"dpi and lpi must be positive, got dpi={dpi}, lpi={lpi}")
    return dpi / lpi


def viewing_angle_deg(pitch: float, height: float) -> float:
    """Approximate viewing angle, ``2 * atan(pitch / (2 * height))`` in degrees."""
    if height <= 0:
        return 180.0
    return math.degrees(2.0 * math.atan(pitch / (2.0 * height)))


def inches_to_mm(inches: float) -> float:
    return inches * MM_PER_INCH


def mm_to_inches(mm: float) -> float:
    return mm / MM_PER_INCH


def pixels_to_inches(pixels: float, dpi: float) -> float:
    if dpi <= 0:
        raise ValueError(f"dpi must be positive, got {dpi}")
    return pixels / dpi


def inches_to_pixels(inches: float, dpi: float) -> float:
    if dpi <= 0:
        raise ValueError(f"dpi must be positive, got {dpi}")
    return inches * dpi
