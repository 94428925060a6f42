# genfractal/kernel/creation.py
"""
CREATION EQUATION: Advancing Position and Heading One Step
==========================================================

The Creation Equation is implemented in its trigonometric form:

    phi_new = phi + dPhi
    x_new   = x + dR * sin(phi_new)
    y_new   = y + dR * cos(phi_new)

Heading is a plain running sum in radians. It is never wrapped to
[0, 2*pi), so long walks accumulate the exact sum of their dPhi values.
"""

import numpy as np
from typing import Tuple


def integrate(
    point: np.ndarray,
    phi: float,
    dR: float,
    dPhi: float,
) -> Tuple[np.ndarray, float]:
    """
    Advance one step along a branch.

    Parameters:
    -----------
    point : array-like, shape (2,)
        Current centre-line point (x, y)
    phi : float
        Current heading (radians)
    dR : float
        Step length (already scaled by the branch radius)
    dPhi : float
        Heading increment (radians)

    Returns:
    --------
    new_point : np.ndarray
        Point after the step
    new_phi : float
        Heading after the step

    Example:
    --------
    >>> p, phi = integrate(np.zeros(2), 0.0, 1.0, 0.0)
    >>> p
    array([0., 1.])
    """
    new_phi = phi + dPhi
    step = dR * np.array([np.sin(new_phi), np.cos(new_phi)])
    return np.asarray(point, dtype=float) + step, new_phi
