# genfractal/generative - Fractal Generators
"""
GENERATIVE: Branching Ribbon Generators
=======================================

This package turns a driver table into ribbon geometry.
The key idea: walk the table, integrate the Creation Equation, and fork
at branch rows into children with isolated repeat counters.

USAGE:
------
    from genfractal.generative import generate_fractal, FractalParams

    params = FractalParams(max_s=99, initial_phi=3.141)
    segments = generate_fractal(table, params)
"""

from .fractal import (
    BranchEvaluator,
    BranchPhase,
    BranchState,
    DivergentLoopError,
    FractalParams,
    evaluate,
    generate_fractal,
)

__all__ = [
    'BranchEvaluator', 'BranchPhase', 'BranchState', 'DivergentLoopError',
    'FractalParams', 'evaluate', 'generate_fractal',
]
