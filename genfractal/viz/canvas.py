# genfractal/viz/canvas.py
"""
CANVAS RENDERING: Ribbon Polygons with Matplotlib
=================================================

PURPOSE:
--------
Draw a stream of Segments as filled quads on a fixed-size canvas and save
the picture to a file (PNG, PDF or SVG).

COORDINATE TRANSFORM:
---------------------
The generator works in model space. The canvas mapping lives here only,
in a RenderConfig value:

    x_canvas = x * scale + xc + width/2
    y_canvas = y * scale - yc + height/2

The canvas y axis points DOWN (screen convention), so the y axis of the
plot is inverted. A heading of ~pi therefore grows the fractal upwards.
"""

import os
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection

from ..model import Segment


@dataclass
class RenderConfig:
    """
    Canvas configuration for the renderers.

    Parameters:
    -----------
    canvas_width, canvas_height : int
        Canvas size in pixels
    scale : float
        Pixels per model unit
    xc, yc : float
        Offsets of the model origin (yc is subtracted, as on the canvas)
    background : str
        Canvas background color
    outline_width : float
        Outline width of each quad, drawn in the quad's own color
    dpi : int
        Resolution of saved raster files
    """
    canvas_width: int = 750
    canvas_height: int = 750
    scale: float = 19.0
    xc: float = 0.0
    yc: float = -100.0
    background: str = "black"
    outline_width: float = 1.0
    dpi: int = 100


def to_canvas(points, config: RenderConfig) -> np.ndarray:
    """
    Map model-space points to canvas pixels.

    Parameters:
    -----------
    points : array-like, shape (..., 2)
    config : RenderConfig

    Returns:
    --------
    np.ndarray, same shape as points

    Example:
    --------
    >>> to_canvas([0.0, 0.0], RenderConfig())
    array([375., 475.])
    """
    pts = np.asarray(points, dtype=float)
    x = pts[..., 0] * config.scale + config.xc + config.canvas_width / 2
    y = pts[..., 1] * config.scale - config.yc + config.canvas_height / 2
    return np.stack([x, y], axis=-1)


def segment_polygons(segments: Iterable[Segment], config: RenderConfig):
    """Canvas polygons (N, 4, 2) and RGB face colors (N, 3) in [0, 1]."""
    polygons = []
    colors = []
    for seg in segments:
        polygons.append(to_canvas(seg.polygon(), config))
        colors.append(np.array(seg.color, dtype=float) / 255.0)
    if not polygons:
        return [], []
    return np.array(polygons), np.array(colors)


def draw_fractal(ax, segments: Iterable[Segment], config: Optional[RenderConfig] = None):
    """
    Draw segments onto an existing matplotlib Axes.

    Quads are drawn in emission order, later branches on top.

    Returns:
    --------
    PolyCollection
        The collection added to the axes
    """
    config = config or RenderConfig()
    polygons, colors = segment_polygons(segments, config)

    collection = PolyCollection(
        polygons,
        facecolors=colors,
        edgecolors=colors,
        linewidths=config.outline_width,
    )
    ax.add_collection(collection)

    ax.set_facecolor(config.background)
    ax.set_xlim(0, config.canvas_width)
    # Screen convention: y grows downwards
    ax.set_ylim(config.canvas_height, 0)
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    return collection


def plot_fractal(
    segments: Iterable[Segment],
    outpath: str,
    config: Optional[RenderConfig] = None,
    title: Optional[str] = None,
) -> None:
    """
    Render segments to an image file.

    Parameters:
    -----------
    segments : Iterable[Segment]
        Output of generate_fractal() or BranchEvaluator.run()
    outpath : str
        File to write (.png, .pdf, .svg); the directory is created if needed
    config : RenderConfig, optional
        Canvas configuration
    title : str, optional
        Figure title

    Example:
    --------
    >>> plot_fractal(segments, "artifacts/fractal.png")
    """
    config = config or RenderConfig()
    fig, ax = plt.subplots(
        figsize=(config.canvas_width / config.dpi, config.canvas_height / config.dpi),
        dpi=config.dpi,
    )
    fig.patch.set_facecolor(config.background)
    draw_fractal(ax, segments, config)
    if title:
        ax.set_title(title, color='white' if config.background == 'black' else 'black')

    os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)

    plt.tight_layout()
    plt.savefig(outpath, dpi=config.dpi, facecolor=fig.get_facecolor())
    plt.close(fig)

    print(f"Fractal plot saved to: {outpath}")
