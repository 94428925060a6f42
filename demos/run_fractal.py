#!/usr/bin/env python3
"""
RUN_FRACTAL: Generate and Render a Genetic Fractal
==================================================

This demo shows the complete table-to-picture workflow:
1. Load the driver table (tab-separated, one header row)
2. Evaluate the branching fractal
3. Summarize the result
4. Render it to PNG (and optionally HTML / CSV)

Run with:
    python demos/run_fractal.py
    python demos/run_fractal.py demos/data/drivers.txt --max-s 40 --out artifacts/tree.png
    python demos/run_fractal.py my_drivers.txt --html artifacts/tree.html --csv artifacts/tree.csv

Outputs:
    artifacts/fractal.png  - Rendered ribbon fractal
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from genfractal.model import Direction
from genfractal.drivers import DataFormatError, load_drivers
from genfractal.generative import DivergentLoopError, FractalParams, generate_fractal
from genfractal.export import export_segments_csv, summarize_segments
from genfractal.viz import RenderConfig, plot_fractal, plot_fractal_html


DEFAULT_DATA = Path(__file__).parent / "data" / "drivers.txt"


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Generate a branching ribbon fractal from a driver table',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python demos/run_fractal.py
  python demos/run_fractal.py demos/data/drivers.txt --max-s 40 --scale 12
  python demos/run_fractal.py drivers.txt --lenient --html artifacts/fractal.html
        """
    )
    parser.add_argument('data', nargs='?', default=str(DEFAULT_DATA),
                        help='Tab-separated driver table (default: demos/data/drivers.txt)')
    parser.add_argument('--max-s', type=int, default=99,
                        help='Maximum step index (default: 99)')
    parser.add_argument('--phi', type=float, default=3.141,
                        help='Initial heading in radians (default: 3.141)')
    parser.add_argument('--radius', type=float, default=1.0,
                        help='Initial radius scale (default: 1.0)')
    parser.add_argument('--column', choices=['L', 'R'], default='L',
                        help='dPhi column of the root branch (default: L)')
    parser.add_argument('--budget', type=int, default=None,
                        help='Steps allowed per branch (default: 10 * max-s)')
    parser.add_argument('--scale', type=float, default=19.0,
                        help='Pixels per model unit (default: 19)')
    parser.add_argument('--out', default='artifacts/fractal.png',
                        help='Image output path (default: artifacts/fractal.png)')
    parser.add_argument('--html', default=None, help='Also write an HTML view')
    parser.add_argument('--csv', default=None, help='Also write the segment table')
    parser.add_argument('--lenient', action='store_true',
                        help='Replace malformed numeric cells with 0 instead of failing')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log fork events and loader details')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print_header("GENETIC FRACTAL GENERATOR")

    # =========================================================================
    # STEP 1: LOAD DRIVERS
    # =========================================================================
    print_header("STEP 1: Driver Table")
    try:
        table = load_drivers(args.data, on_bad_cell="zero" if args.lenient else "raise")
    except (DataFormatError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"""
    File:          {args.data}
    Rows:          {len(table)}
    Branch rows:   {table.branch_rows}
    """)

    # =========================================================================
    # STEP 2: EVALUATE
    # =========================================================================
    print_header("STEP 2: Evaluate")
    params = FractalParams(
        max_s=args.max_s,
        initial_phi=args.phi,
        initial_r=args.radius,
        initial_column=Direction(args.column),
        step_budget=args.budget,
    )
    try:
        segments = generate_fractal(table, params)
    except DivergentLoopError as e:
        print(f"ERROR: {e}")
        return 1

    summary = summarize_segments(segments)
    print(f"""
    max_s:         {params.max_s}
    Step budget:   {params.budget} per branch
    Segments:      {summary['n_segments']}
    Max depth:     {summary['max_depth']}
    Per depth:     {summary['per_depth']}
    Degenerate:    {summary['degenerate']}
    Bounds:        {summary['bounds']}
    """)

    # =========================================================================
    # STEP 3: RENDER
    # =========================================================================
    print_header("STEP 3: Render")
    config = RenderConfig(scale=args.scale)
    plot_fractal(segments, args.out, config)
    if args.html:
        plot_fractal_html(segments, args.html, config)
    if args.csv:
        export_segments_csv(segments, args.csv)

    print_header("DONE")
    return 0


if __name__ == "__main__":
    sys.exit(main())
