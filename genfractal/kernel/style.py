# genfractal/kernel/style.py
"""Segment color: per-step RGB scaled by luminosity, clamped to a byte."""

import numpy as np
from typing import Tuple

RGB = Tuple[int, int, int]


def resolve_color(step) -> RGB:
    """
    Resolve the color of a segment from a driver row.

    Each channel is round(channel * luminosity), clamped to [0, 255].

    Parameters:
    -----------
    step : DriverStep
        Row providing colorR, colorG, colorB and luminosity

    Returns:
    --------
    Tuple[int, int, int]

    Example:
    --------
    >>> resolve_color(DriverStep(0, 1.0, 0.0, 0.0, colorR=200, colorG=0,
    ...                          colorB=0, luminosity=0.5))
    (100, 0, 0)
    """
    channels = np.array([step.colorR, step.colorG, step.colorB], dtype=float)
    scaled = np.clip(np.rint(channels * step.luminosity), 0, 255).astype(int)
    return tuple(int(c) for c in scaled)


def to_hex(rgb: RGB) -> str:
    """Format an RGB triple as '#RRGGBB'."""
    r, g, b = rgb
    return f"#{r:02X}{g:02X}{b:02X}"
