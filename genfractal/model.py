# genfractal/model.py
"""
MODEL DEFINITIONS: DriverStep, Direction and Segment
=====================================================

PURPOSE:
--------
This module defines the basic data structures of a genetic fractal:
- Direction: which dPhi column a branch reads (Left or Right)
- DriverStep: one row of the driver table, governing step index s
- Segment: one emitted piece of ribbon (a quad plus its color)

GEOMETRY CONTEXT:
-----------------
A genetic fractal is drawn as a RIBBON: every step adds a quadrilateral
whose begin edge is the previous step's end edge. Each quad is described
by four points:

    begin_left ---- end_left
        |              |
    begin_right --- end_right

All coordinates are in MODEL SPACE. Scaling and canvas offsets belong
to the renderer (see genfractal.viz).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple

import numpy as np

from .kernel.style import to_hex


class Direction(Enum):
    """Branch direction, also used as the dPhi column selector."""
    LEFT = "L"
    RIGHT = "R"

    @property
    def opposite(self) -> "Direction":
        return Direction.RIGHT if self is Direction.LEFT else Direction.LEFT

    @classmethod
    def parse_set(cls, text) -> FrozenSet["Direction"]:
        """
        Parse a branchDirections cell ("L", "R", "LR") into a set.

        Blank cells give an empty set. Letters are case-insensitive and
        their order does not matter ("RL" == "LR").

        Raises:
        -------
        ValueError
            If the text contains anything other than L and R
        """
        if text is None:
            return frozenset()
        cleaned = str(text).strip().upper()
        if cleaned in ("", "NAN", "NONE", "-"):
            return frozenset()
        directions = set()
        for letter in cleaned:
            try:
                directions.add(cls(letter))
            except ValueError:
                raise ValueError(
                    f"Invalid branch direction {text!r}: expected 'L', 'R' or 'LR'"
                ) from None
        return frozenset(directions)


# Spawn order at a fork: the Left-direction child always runs first
DIRECTION_ORDER: Tuple[Direction, ...] = (Direction.LEFT, Direction.RIGHT)


@dataclass(frozen=True)
class DriverStep:
    """
    One row of the driver table.

    Parameters:
    -----------
    index : int
        Step index s (equals the row position in the table)

    dR : float
        Radius increment, later scaled by the branch's accumulated radius

    dPhiLeft, dPhiRight : float
        Heading increments (radians) for the two dPhi columns

    branchAngle : float
        Angular spacing between siblings at a fork (radians)

    branchCount : int
        Number of fan positions at a fork (0 = not a branch row)

    branchDirections : FrozenSet[Direction]
        Which directions spawn a child at each fan position

    repeatCount : int
        How many times this row loops back before the walk passes it

    repeatFromIndex : int
        Row the walk jumps back to while the repeat counter is nonzero

    width : float
        Ribbon width factor (relative to the step length)

    colorR, colorG, colorB : float
        Base color channels (0-255 scale)

    luminosity : float
        Multiplier applied to every color channel

    Notes:
    ------
    - frozen=True keeps the loaded table immutable; repeat counters are
      tracked in a per-branch RepeatOverlay instead of in the rows.
    """
    index: int
    dR: float
    dPhiLeft: float
    dPhiRight: float
    branchAngle: float = 0.0
    branchCount: int = 0
    branchDirections: FrozenSet[Direction] = field(default_factory=frozenset)
    repeatCount: int = 0
    repeatFromIndex: int = 0
    width: float = 0.0
    colorR: float = 255.0
    colorG: float = 255.0
    colorB: float = 255.0
    luminosity: float = 1.0

    @property
    def is_branch(self) -> bool:
        return self.branchCount > 0

    def dphi(self, column: Direction) -> float:
        """Heading increment read from the selected column."""
        return self.dPhiLeft if column is Direction.LEFT else self.dPhiRight


@dataclass(frozen=True, eq=False)
class Segment:
    """
    One emitted ribbon quad.

    Parameters:
    -----------
    begin, end : np.ndarray
        Centre-line points of the step (shape (2,))

    begin_left, begin_right : np.ndarray
        Ribbon edges at the begin point (the previous step's end edges)

    end_left, end_right : np.ndarray
        Ribbon edges computed for this step

    color : Tuple[int, int, int]
        Resolved RGB color, each channel in [0, 255]

    step : int
        Driver row the style (width, color) was read from

    depth : int
        Generation of the branch that emitted it (root = 0)
    """
    begin: np.ndarray
    end: np.ndarray
    begin_left: np.ndarray
    begin_right: np.ndarray
    end_left: np.ndarray
    end_right: np.ndarray
    color: Tuple[int, int, int]
    step: int
    depth: int = 0

    def quad(self):
        """(begin_left, begin_right, end_left, end_right, color) for renderers."""
        return (self.begin_left, self.begin_right, self.end_left, self.end_right, self.color)

    def polygon(self) -> np.ndarray:
        """Quad corners in drawing order, shape (4, 2)."""
        return np.array([self.begin_left, self.end_left, self.end_right, self.begin_right])

    @property
    def hex_color(self) -> str:
        return to_hex(self.color)
