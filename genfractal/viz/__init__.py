# genfractal/viz - Rendering Tools
"""
VIZ: Renderers for Generated Segments
=====================================

This package provides the renderers that consume the segment stream:
- canvas: static images with matplotlib (PNG, PDF, SVG)
- html: standalone interactive HTML with Plotly

Neither renderer feeds anything back into the generator.
"""

from .canvas import RenderConfig, draw_fractal, plot_fractal, segment_polygons, to_canvas
from .html import create_fractal_figure, plot_fractal_html

__all__ = [
    'RenderConfig', 'draw_fractal', 'plot_fractal', 'segment_polygons', 'to_canvas',
    'create_fractal_figure', 'plot_fractal_html',
]
