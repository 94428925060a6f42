# File: tests/test_render_smoke.py
"""
Smoke tests for the consumers of the segment stream: canvas and HTML
renderers, the segment table export and the demo script.

These check that the pipeline runs end to end and writes its files, not
pixel-exact output.
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from genfractal.drivers import load_drivers
from genfractal.export import (
    SEGMENT_COLUMNS,
    export_segments_csv,
    segments_to_dataframe,
    summarize_segments,
)
from genfractal.generative import FractalParams, generate_fractal
from genfractal.viz import (
    RenderConfig,
    create_fractal_figure,
    plot_fractal,
    plot_fractal_html,
    segment_polygons,
    to_canvas,
)

ROOT = Path(__file__).parent.parent
SAMPLE = ROOT / "demos" / "data" / "drivers.txt"


@pytest.fixture(scope="module")
def segments():
    return generate_fractal(load_drivers(SAMPLE), FractalParams(max_s=40))


def test_sample_fractal_branches(segments):
    summary = summarize_segments(segments)
    assert summary['n_segments'] == len(segments) > 40
    assert summary['max_depth'] >= 2
    assert sum(summary['per_depth'].values()) == len(segments)
    xmin, ymin, xmax, ymax = summary['bounds']
    assert xmin < xmax and ymin < ymax
    print(f"✓ Sample fractal: {summary['n_segments']} segments, depth {summary['max_depth']}")


def test_origin_maps_to_canvas_default():
    """Default canvas 750x750, yc=-100: model origin lands at (375, 475)."""
    np.testing.assert_allclose(to_canvas([0.0, 0.0], RenderConfig()), [375.0, 475.0])


def test_to_canvas_scales_and_offsets():
    config = RenderConfig(canvas_width=100, canvas_height=200, scale=10, xc=5, yc=20)
    np.testing.assert_allclose(to_canvas([[1.0, 2.0]], config), [[65.0, 100.0]])


def test_segment_polygons_shapes(segments):
    polygons, colors = segment_polygons(segments, RenderConfig())
    assert polygons.shape == (len(segments), 4, 2)
    assert colors.shape == (len(segments), 3)
    assert colors.min() >= 0.0 and colors.max() <= 1.0


def test_plot_fractal_writes_png(segments, tmp_path):
    out = tmp_path / "img" / "fractal.png"
    plot_fractal(segments, str(out), title="sample")
    assert out.exists() and out.stat().st_size > 0


def test_plot_empty_stream(tmp_path):
    out = tmp_path / "empty.png"
    plot_fractal([], str(out))
    assert out.exists()


def test_html_figure_one_trace_per_color(segments, tmp_path):
    fig = create_fractal_figure(segments)
    n_colors = len({seg.hex_color for seg in segments})
    assert len(fig.data) == n_colors

    out = tmp_path / "fractal.html"
    plot_fractal_html(segments, str(out))
    assert out.exists()
    assert "plotly" in out.read_text().lower()


def test_segment_table_and_csv(segments, tmp_path):
    df = segments_to_dataframe(segments)
    assert list(df.columns) == SEGMENT_COLUMNS
    assert len(df) == len(segments)
    assert list(df['seq']) == list(range(len(segments)))

    out = tmp_path / "segments.csv"
    export_segments_csv(segments, str(out))
    reloaded = pd.read_csv(out)
    assert len(reloaded) == len(segments)
    np.testing.assert_allclose(reloaded['end_x'], df['end_x'])


def test_empty_summary():
    summary = summarize_segments([])
    assert summary['n_segments'] == 0
    assert summary['max_depth'] == -1
    assert summary['bounds'] is None


def test_demo_script_runs(tmp_path):
    sys.path.insert(0, str(ROOT / "demos"))
    try:
        import run_fractal
    finally:
        sys.path.pop(0)

    out = tmp_path / "demo.png"
    csv = tmp_path / "demo.csv"
    code = run_fractal.main([str(SAMPLE), "--max-s", "40", "--out", str(out), "--csv", str(csv)])
    assert code == 0
    assert out.exists() and csv.exists()


def test_demo_script_reports_bad_file(tmp_path):
    sys.path.insert(0, str(ROOT / "demos"))
    try:
        import run_fractal
    finally:
        sys.path.pop(0)

    bad = tmp_path / "bad.txt"
    bad.write_text("a\tb\n1\t2\n")
    assert run_fractal.main([str(bad), "--out", str(tmp_path / "x.png")]) == 1
