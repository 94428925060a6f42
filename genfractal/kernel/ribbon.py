# genfractal/kernel/ribbon.py
"""
RIBBON GEOMETRY: Left and Right Edge Points
===========================================

Instead of drawing a line with a fixed stroke width, every step is drawn
as a polygon whose width may differ at its start and end. We only compute
the edges at the END of the step; the begin edges are the end edges of
the previous step, so neighbouring quads share their vertices exactly.

Construction:

    d = end - begin            (step vector, brought back to the origin)
    n = (-d_y, d_x)            (perpendicular, NOT normalized)
    left  = end - n * width/2
    right = end + n * width/2

Because n is not normalized, `width` is relative to the step length.

Degenerate case: a zero-length step (dR = 0) gives n = (0, 0) and
left == right == end. The resulting quad collapses to a triangle (or to
a point when the begin edges coincide too). This is valid output.
"""

import numpy as np
from typing import Tuple


def perpendicular(vector: np.ndarray) -> np.ndarray:
    """Rotate a 2D vector by +90 degrees: (x, y) -> (-y, x)."""
    return np.array([-vector[1], vector[0]], dtype=float)


def next_edges(
    begin: np.ndarray,
    end: np.ndarray,
    width: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the ribbon edge points at the end of a step.

    Parameters:
    -----------
    begin : array-like, shape (2,)
        Start of the step (centre line)
    end : array-like, shape (2,)
        End of the step (centre line)
    width : float
        Ribbon width factor from the driver row

    Returns:
    --------
    (left, right) : Tuple[np.ndarray, np.ndarray]

    Example:
    --------
    >>> left, right = next_edges([0, 0], [0, 1], 2.0)
    >>> left, right
    (array([1., 1.]), array([-1., 1.]))
    """
    end = np.asarray(end, dtype=float)
    n = perpendicular(end - np.asarray(begin, dtype=float))
    half = n * width / 2
    return end - half, end + half
