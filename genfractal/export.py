# genfractal/export.py
"""
EXPORT: Segment Tables and Summaries
====================================

Turns a segment stream into a pandas DataFrame (one row per quad) for
CSV export or further analysis, and computes a compact summary of a
generated fractal.

Columns of the segment table:

    seq, depth, step,
    begin_x, begin_y, end_x, end_y,
    begin_left_x, begin_left_y, begin_right_x, begin_right_y,
    end_left_x, end_left_y, end_right_x, end_right_y,
    r, g, b, color
"""

import os
from typing import Dict, Iterable

import numpy as np
import pandas as pd

from .model import Segment


SEGMENT_COLUMNS = [
    'seq', 'depth', 'step',
    'begin_x', 'begin_y', 'end_x', 'end_y',
    'begin_left_x', 'begin_left_y', 'begin_right_x', 'begin_right_y',
    'end_left_x', 'end_left_y', 'end_right_x', 'end_right_y',
    'r', 'g', 'b', 'color',
]


def segments_to_dataframe(segments: Iterable[Segment]) -> pd.DataFrame:
    """
    One row per segment, in emission order.

    Parameters:
    -----------
    segments : Iterable[Segment]

    Returns:
    --------
    pd.DataFrame
        Columns as in SEGMENT_COLUMNS
    """
    rows = []
    for seq, seg in enumerate(segments):
        r, g, b = seg.color
        rows.append({
            'seq': seq,
            'depth': seg.depth,
            'step': seg.step,
            'begin_x': seg.begin[0], 'begin_y': seg.begin[1],
            'end_x': seg.end[0], 'end_y': seg.end[1],
            'begin_left_x': seg.begin_left[0], 'begin_left_y': seg.begin_left[1],
            'begin_right_x': seg.begin_right[0], 'begin_right_y': seg.begin_right[1],
            'end_left_x': seg.end_left[0], 'end_left_y': seg.end_left[1],
            'end_right_x': seg.end_right[0], 'end_right_y': seg.end_right[1],
            'r': r, 'g': g, 'b': b,
            'color': seg.hex_color,
        })
    return pd.DataFrame(rows, columns=SEGMENT_COLUMNS)


def export_segments_csv(segments: Iterable[Segment], outpath: str) -> pd.DataFrame:
    """Write the segment table to CSV and return it."""
    df = segments_to_dataframe(segments)
    os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
    df.to_csv(outpath, index=False)
    print(f"Segment table exported to: {outpath}")
    return df


def summarize_segments(segments: Iterable[Segment]) -> Dict[str, object]:
    """
    Summary of a generated fractal.

    Returns:
    --------
    dict with keys:
        n_segments     : total number of quads
        max_depth      : deepest generation reached (-1 when empty)
        per_depth      : {depth: number of segments}
        bounds         : (xmin, ymin, xmax, ymax) over all ribbon points,
                         None when empty
        degenerate     : quads whose end edges coincide (zero-length step or zero width)
    """
    df = segments_to_dataframe(segments)
    if df.empty:
        return {
            'n_segments': 0,
            'max_depth': -1,
            'per_depth': {},
            'bounds': None,
            'degenerate': 0,
        }

    xs = df[['begin_left_x', 'begin_right_x', 'end_left_x', 'end_right_x']].to_numpy()
    ys = df[['begin_left_y', 'begin_right_y', 'end_left_y', 'end_right_y']].to_numpy()
    degenerate = np.isclose(df['end_left_x'], df['end_right_x']) & \
        np.isclose(df['end_left_y'], df['end_right_y'])

    return {
        'n_segments': len(df),
        'max_depth': int(df['depth'].max()),
        'per_depth': {int(k): int(v) for k, v in df.groupby('depth').size().items()},
        'bounds': (float(xs.min()), float(ys.min()), float(xs.max()), float(ys.max())),
        'degenerate': int(degenerate.sum()),
    }
