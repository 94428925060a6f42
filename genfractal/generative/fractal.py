# genfractal/generative/fractal.py
"""
FRACTAL GENERATOR: Branch Evaluation over a Driver Table
========================================================

PURPOSE:
--------
Walk a driver table, integrate position and heading with the Creation
Equation, and fork into child branches at branch rows. The result is a
stream of ribbon Segments in model space.

HOW A BRANCH IS WALKED:
-----------------------
A branch is a BranchState frame. Its phase goes through:

    WALKING  ->  FORKING   (a branch row was walked and s < limit)
             ->  TERMINAL  (s reached min(max_s, len(table)))

where limit = min(max_s, len(table)). Each step of the walk:

    1. REPEAT: while overlay[s] != 0, decrement it and jump
       s = table[s].repeatFromIndex (no segment for the visit)
       and a jump to a row at or beyond the limit ends the branch
    2. INTEGRATE with the dR/dPhi that were read BEFORE the jump
    3. STYLE (width, color) from table[s], i.e. AFTER the jump
    4. EMIT a Segment; the new end edges become the next begin edges
    5. READ dR = table[s].dR * last_r and dPhi for the next step,
       s += 1, and check for a branch row / the limit

Every frame walks at least one step before it may fork. Two adjacent
branch rows would otherwise fork forever without emitting anything.

FORKING:
--------
The branch row is table[s - 1]. For bn = 1..branchCount:

    fan_offset = bn - branchCount/2 - 0.5
    heading    = phi + fan_offset * branchAngle

and for each active direction (Left first, then Right) a child is
spawned that reads the OPPOSITE dPhi column, starts at the same s and
point, inherits last_r = the branch row's accumulated dR, and owns a
snapshot of the parent's repeat overlay.

All snapshots are taken before any child runs. Children are evaluated
depth-first in spawn order, using an explicit work stack instead of
Python recursion.

USAGE:
------
    from genfractal.drivers import load_drivers
    from genfractal.generative import generate_fractal, FractalParams

    table = load_drivers("drivers.txt")
    segments = generate_fractal(table, FractalParams(max_s=99))
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from ..kernel.creation import integrate
from ..kernel.overlay import RepeatOverlay
from ..kernel.ribbon import next_edges
from ..kernel.style import resolve_color
from ..model import DIRECTION_ORDER, Direction, Segment

logger = logging.getLogger(__name__)


class DivergentLoopError(RuntimeError):
    """Raised when a branch exceeds its step budget (a repeat loop that never ends)."""

    def __init__(self, step: int, budget: int, depth: int):
        self.step = step
        self.budget = budget
        self.depth = depth
        super().__init__(
            f"Branch at depth {depth} exceeded its budget of {budget} steps "
            f"(last at step {step}). Check repeatCount/repeatFromIndex for a "
            f"loop that never counts down to zero."
        )


class BranchPhase(Enum):
    WALKING = "walking"
    FORKING = "forking"
    TERMINAL = "terminal"


@dataclass
class FractalParams:
    """
    Parameters of a fractal evaluation.

    Parameters:
    -----------
    max_s : int
        Upper bound for the step index (rows at or beyond it are never
        walked). Configured, not derived from the table length.
    initial_phi : float
        Heading of the root branch (radians)
    initial_r : float
        Radius scale of the root branch
    initial_column : Direction
        dPhi column read by the root branch
    origin : Tuple[float, float]
        Start point of the root branch; its ribbon edges start there too
    step_budget : int, optional
        Maximum steps plus repeat jumps per branch. None means 10 * max_s.
    """
    max_s: int = 99
    initial_phi: float = 3.141
    initial_r: float = 1.0
    initial_column: Direction = Direction.LEFT
    origin: Tuple[float, float] = (0.0, 0.0)
    step_budget: Optional[int] = None

    def __post_init__(self):
        if self.max_s < 0:
            raise ValueError(f"max_s must be >= 0, got {self.max_s}")
        if self.step_budget is not None and self.step_budget <= 0:
            raise ValueError(f"step_budget must be > 0, got {self.step_budget}")
        if not isinstance(self.initial_column, Direction):
            self.initial_column = Direction(str(self.initial_column).upper())

    @property
    def budget(self) -> int:
        if self.step_budget is not None:
            return self.step_budget
        return 10 * self.max_s


@dataclass
class BranchState:
    """
    Mutable state of one branch frame on the work stack.

    point, left, right : current centre point and ribbon edges
    phi                : heading in radians (never wrapped)
    last_r             : radius scale applied to every dR of this branch
    s                  : current step index
    column             : dPhi column this branch reads
    overlay            : repeat counters owned by this branch
    depth              : number of forks between the root and this branch
    fork_r             : accumulated dR of the branch row, handed to children
    """
    point: np.ndarray
    left: np.ndarray
    right: np.ndarray
    phi: float
    last_r: float
    s: int
    column: Direction
    overlay: RepeatOverlay
    depth: int = 0
    phase: BranchPhase = BranchPhase.WALKING
    steps_taken: int = 0
    fork_r: float = 0.0

    @classmethod
    def at(cls, point, phi: float, last_r: float, s: int, column: Direction,
           overlay: RepeatOverlay, left=None, right=None, depth: int = 0) -> "BranchState":
        """Frame at a point; edges default to the point itself."""
        p = np.asarray(point, dtype=float)
        return cls(
            point=p.copy(),
            left=p.copy() if left is None else np.asarray(left, dtype=float),
            right=p.copy() if right is None else np.asarray(right, dtype=float),
            phi=phi,
            last_r=last_r,
            s=s,
            column=column,
            overlay=overlay,
            depth=depth,
        )


class BranchEvaluator:
    """
    Depth-first evaluator of a genetic fractal.

    The evaluator never mutates the table. All per-branch state lives
    in BranchState frames, so one evaluator can produce any number of
    independent streams.

    Parameters:
    -----------
    table : DriverTable
        Immutable driver rows
    params : FractalParams, optional
        Evaluation parameters (defaults to FractalParams())
    """

    def __init__(self, table, params: Optional[FractalParams] = None):
        self.table = table
        self.params = params or FractalParams()
        self.limit = min(self.params.max_s, len(table))
        self.budget = self.params.budget
        if len(table) < self.params.max_s:
            logger.debug(
                "Driver table has %d rows, fewer than max_s=%d; walks end at the table end",
                len(table), self.params.max_s,
            )

    def root(self) -> BranchState:
        """Root frame from the configured origin, heading and column."""
        p = self.params
        return BranchState.at(
            p.origin, p.initial_phi, p.initial_r, 0, p.initial_column,
            RepeatOverlay(self.table),
        )

    def _consume(self, state: BranchState, s: int) -> None:
        state.steps_taken += 1
        if state.steps_taken > self.budget:
            raise DivergentLoopError(s, self.budget, state.depth)

    def walk(self, state: BranchState) -> Iterator[Segment]:
        """
        Walk one frame until it forks or terminates, yielding its segments.

        The frame is updated in place. When the generator is exhausted,
        state.phase is FORKING or TERMINAL.

        Raises:
        -------
        DivergentLoopError
            If the frame exceeds the step budget
        """
        table = self.table
        s = state.s
        state.phase = BranchPhase.WALKING

        if s >= self.limit:
            state.phase = BranchPhase.TERMINAL
            return

        step = table[s]
        dR = step.dR * state.last_r
        dPhi = step.dphi(state.column)

        while True:
            while state.overlay[s] != 0:
                self._consume(state, s)
                state.overlay.decrement(s)
                s = table[s].repeatFromIndex
                if s >= self.limit:
                    # jumped to a row at or beyond max_s
                    state.s = s
                    state.phase = BranchPhase.TERMINAL
                    return
            self._consume(state, s)

            new_point, state.phi = integrate(state.point, state.phi, dR, dPhi)
            style = table[s]
            left, right = next_edges(state.point, new_point, style.width)
            yield Segment(
                begin=state.point,
                end=new_point,
                begin_left=state.left,
                begin_right=state.right,
                end_left=left,
                end_right=right,
                color=resolve_color(style),
                step=s,
                depth=state.depth,
            )
            state.point, state.left, state.right = new_point, left, right

            dR = style.dR * state.last_r
            dPhi = style.dphi(state.column)
            s += 1
            state.s = s

            if s >= self.limit:
                state.phase = BranchPhase.TERMINAL
                return
            if style.is_branch:
                state.phase = BranchPhase.FORKING
                state.fork_r = dR
                return

    def fork(self, state: BranchState) -> List[BranchState]:
        """
        Spawn the children of a frame that stopped on a branch row.

        Returns the children in evaluation order: for each fan position
        bn = 1..branchCount, the Left-direction child then the
        Right-direction child (when active).
        """
        if state.phase is not BranchPhase.FORKING:
            raise ValueError(f"Cannot fork a branch in phase {state.phase.value}")

        row = self.table[state.s - 1]
        count = row.branchCount
        children = []
        for bn in range(1, count + 1):
            fan_offset = bn - count / 2.0 - 0.5
            heading = state.phi + fan_offset * row.branchAngle
            for direction in DIRECTION_ORDER:
                if direction not in row.branchDirections:
                    continue
                children.append(BranchState.at(
                    state.point,
                    heading,
                    state.fork_r,
                    state.s,
                    direction.opposite,
                    state.overlay.snapshot(),
                    left=state.left.copy(),
                    right=state.right.copy(),
                    depth=state.depth + 1,
                ))

        logger.debug(
            "Fork at row %d (depth %d): %d children, angle %.4f",
            row.index, state.depth, len(children), row.branchAngle,
        )
        return children

    def run(self, state: Optional[BranchState] = None) -> Iterator[Segment]:
        """
        Stream the segments of a frame and all of its descendants.

        Parameters:
        -----------
        state : BranchState, optional
            Starting frame (defaults to root())

        Yields:
        -------
        Segment
            Depth-first, in spawn order
        """
        stack = [state if state is not None else self.root()]
        while stack:
            current = stack.pop()
            yield from self.walk(current)
            if current.phase is BranchPhase.FORKING:
                stack.extend(reversed(self.fork(current)))


def evaluate(
    table,
    overlay: Optional[RepeatOverlay],
    last_point,
    last_phi: float,
    last_r: float,
    s: int,
    column: Direction,
    params: Optional[FractalParams] = None,
    left=None,
    right=None,
) -> Iterator[Segment]:
    """
    Evaluate the branch starting at step s and all of its descendants.

    Parameters:
    -----------
    table : DriverTable
        Immutable driver rows
    overlay : RepeatOverlay or None
        Repeat counters of this lineage (None = fresh counters from the table).
        The overlay is used as-is and is mutated by the walk.
    last_point : array-like, shape (2,)
        Start point of the branch
    last_phi : float
        Heading at the start (radians)
    last_r : float
        Radius scale for the branch
    s : int
        Step index to start from
    column : Direction
        dPhi column the branch reads
    params : FractalParams, optional
        Provides max_s and the step budget
    left, right : array-like, optional
        Ribbon edges at the start point (default: the point itself)

    Yields:
    -------
    Segment
    """
    evaluator = BranchEvaluator(table, params)
    if overlay is None:
        overlay = RepeatOverlay(table)
    state = BranchState.at(last_point, last_phi, last_r, s, column, overlay,
                           left=left, right=right)
    return evaluator.run(state)


def generate_fractal(
    table,
    params: Optional[FractalParams] = None,
) -> List[Segment]:
    """
    Generate every segment of a fractal from its root.

    Parameters:
    -----------
    table : DriverTable
        Immutable driver rows
    params : FractalParams, optional
        Evaluation parameters

    Returns:
    --------
    List[Segment]
        All segments in depth-first emission order

    Raises:
    -------
    DivergentLoopError
        If any branch exceeds the step budget

    Example:
    --------
    >>> segments = generate_fractal(table, FractalParams(max_s=50))
    >>> print(f"Generated {len(segments)} segments")
    """
    return list(BranchEvaluator(table, params).run())
