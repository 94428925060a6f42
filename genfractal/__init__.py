# genfractal - Genetic Fractal Generation
"""
GENFRACTAL: Branching Ribbon Fractals from a Driver Table
=========================================================

This package provides:
- Loading of tab-separated driver tables (one row per step index s)
- The Creation Equation integrator and ribbon geometry
- A depth-first branch evaluator with per-branch repeat counters
- Renderers (matplotlib, Plotly) and tabular export (pandas)

ARCHITECTURE:
-------------
    model.py        Data model (Direction, DriverStep, Segment)
    drivers.py      DriverTable, load_drivers, DataFormatError
    kernel/         Pure step-level pieces (integrator, ribbon, style, overlay)
    generative/     Branch evaluator (FractalParams, generate_fractal)
    viz/            Renderers (RenderConfig, plot_fractal, plot_fractal_html)
    export.py       Segment DataFrame/CSV export and summaries
"""

from .model import Direction, DriverStep, Segment
from .drivers import DataFormatError, DriverTable, load_drivers
from .generative import DivergentLoopError, FractalParams, generate_fractal

__version__ = "0.1.0"

__all__ = [
    'Direction', 'DriverStep', 'Segment',
    'DataFormatError', 'DriverTable', 'load_drivers',
    'DivergentLoopError', 'FractalParams', 'generate_fractal',
]
