# genfractal/viz/html.py
"""
HTML VIEWER: Standalone Plotly Figure of a Fractal
==================================================

Creates a Plotly figure with one filled trace per color, so the HTML
stays small even for thousands of quads. Zoom and pan come for free in
the browser; the figure is static otherwise.
"""

import os
from collections import OrderedDict
from typing import Iterable, Optional

import plotly.graph_objects as go

from ..model import Segment
from .canvas import RenderConfig, to_canvas


def create_fractal_figure(
    segments: Iterable[Segment],
    config: Optional[RenderConfig] = None,
    title: str = "Genetic Fractal",
) -> go.Figure:
    """
    Build a Plotly figure of ribbon quads in canvas coordinates.

    Quads sharing a color are merged into a single trace, separated by
    None breaks (Plotly fills each closed sub-path).

    Parameters:
    -----------
    segments : Iterable[Segment]
    config : RenderConfig, optional
    title : str

    Returns:
    --------
    go.Figure
    """
    config = config or RenderConfig()
    by_color = OrderedDict()
    for seg in segments:
        poly = to_canvas(seg.polygon(), config)
        xs, ys = by_color.setdefault(seg.hex_color, ([], []))
        xs.extend(list(poly[:, 0]) + [poly[0, 0], None])
        ys.extend(list(poly[:, 1]) + [poly[0, 1], None])

    fig = go.Figure()
    for color, (xs, ys) in by_color.items():
        fig.add_trace(go.Scatter(
            x=xs, y=ys,
            mode='lines',
            fill='toself',
            fillcolor=color,
            line=dict(color=color, width=config.outline_width),
            name=color,
            hoverinfo='skip',
            showlegend=False,
        ))

    fig.update_layout(
        title=dict(text=title, font=dict(size=16)),
        width=config.canvas_width,
        height=config.canvas_height,
        plot_bgcolor=config.background,
        paper_bgcolor=config.background,
        xaxis=dict(range=[0, config.canvas_width], visible=False),
        # Screen convention: y grows downwards
        yaxis=dict(range=[config.canvas_height, 0], visible=False,
                   scaleanchor='x', scaleratio=1),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def plot_fractal_html(
    segments: Iterable[Segment],
    outpath: str,
    config: Optional[RenderConfig] = None,
    title: str = "Genetic Fractal",
) -> go.Figure:
    """Create the figure and save it as a standalone HTML file."""
    fig = create_fractal_figure(segments, config=config, title=title)
    os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
    fig.write_html(outpath)
    print(f"HTML view saved to: {outpath}")
    return fig
