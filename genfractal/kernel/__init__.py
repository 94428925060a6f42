# genfractal/kernel - Pure step-level building blocks
"""
KERNEL: THE STEP-LEVEL FOUNDATION
=================================

This package contains the pure pieces the branch evaluator is built from.
None of them know about branching, the work stack or rendering:

    creation.py   Creation Equation (position/heading integrator)
    ribbon.py     Left/right ribbon edges of a step
    style.py      Color resolution from RGB + luminosity
    overlay.py    Per-branch repeat counters over an immutable table
"""

from .creation import integrate
from .ribbon import next_edges, perpendicular
from .style import resolve_color, to_hex
from .overlay import RepeatOverlay

__all__ = [
    'integrate', 'next_edges', 'perpendicular',
    'resolve_color', 'to_hex', 'RepeatOverlay',
]
