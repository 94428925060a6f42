# genfractal/drivers.py
"""
DRIVERS: THE DRIVER TABLE AND ITS LOADER
========================================

PURPOSE:
--------
A genetic fractal is fully described by a table of "driver" values, one
row per step index s. This module turns a tab-separated export (e.g. from
a spreadsheet) into an immutable DriverTable.

FILE FORMAT:
------------
One header row (discarded), then tab-separated rows with the columns in
this fixed order:

    index  dR  dPhiLeft  dPhiRight  branchAngle  branchCount
    branchDirections  repeatCount  repeatFromIndex  width
    colorR  colorG  colorB  luminosity

- index, branchCount, repeatCount, repeatFromIndex: integers
- branchDirections: "L", "R", "LR" or blank
- everything else: floats

MALFORMED CELLS:
----------------
By default a non-numeric or non-finite cell (inf, nan) raises
DataFormatError naming every bad cell. With on_bad_cell="zero" those
cells are replaced by 0 and a warning listing them is logged. Structural
problems (column count, index order, repeat targets outside the table,
bad direction strings) always raise.
"""

import logging
import os
from collections.abc import Sequence
from typing import Iterator, List, Literal, Tuple

import numpy as np
import pandas as pd

from .model import Direction, DriverStep

logger = logging.getLogger(__name__)


COLUMNS: Tuple[str, ...] = (
    "index",
    "dR",
    "dPhiLeft",
    "dPhiRight",
    "branchAngle",
    "branchCount",
    "branchDirections",
    "repeatCount",
    "repeatFromIndex",
    "width",
    "colorR",
    "colorG",
    "colorB",
    "luminosity",
)

INT_COLUMNS = ("index", "branchCount", "repeatCount", "repeatFromIndex")
TEXT_COLUMNS = ("branchDirections",)
FLOAT_COLUMNS = tuple(c for c in COLUMNS if c not in INT_COLUMNS + TEXT_COLUMNS)


class DataFormatError(ValueError):
    """Raised when a driver table cannot be parsed or is inconsistent."""
    pass


class DriverTable(Sequence):
    """
    Immutable, ordered table of DriverStep rows.

    Rows are addressed by step index: table[s] is the row with index s.
    The table is validated once at construction:
    - index values are contiguous from 0 and match the row position
    - every repeatFromIndex addresses a row of the table

    Examples:
    ---------
    >>> table = DriverTable([DriverStep(0, 1.0, 0.1, -0.1)])
    >>> len(table), table[0].dR
    (1, 1.0)
    """

    def __init__(self, steps):
        self._steps: Tuple[DriverStep, ...] = tuple(steps)
        self._validate()

    def _validate(self) -> None:
        n = len(self._steps)
        for position, step in enumerate(self._steps):
            if step.index != position:
                raise DataFormatError(
                    f"Row {position} has index {step.index}; indices must be "
                    f"contiguous from 0 and match the row order"
                )
            if step.repeatCount != 0 and not 0 <= step.repeatFromIndex < n:
                raise DataFormatError(
                    f"Row {position} repeats from index {step.repeatFromIndex}, "
                    f"outside the table (0..{n - 1})"
                )

    def __getitem__(self, s: int) -> DriverStep:
        if isinstance(s, slice):
            # a slice would not start at index 0
            raise TypeError("DriverTable rows are addressed by step index; slicing is not supported")
        return self._steps[s]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[DriverStep]:
        return iter(self._steps)

    def __repr__(self) -> str:
        return f"DriverTable({len(self)} steps)"

    @property
    def branch_rows(self) -> List[int]:
        """Indices of rows that fork (branchCount > 0)."""
        return [step.index for step in self._steps if step.is_branch]

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "DriverTable":
        """
        Build a table from a DataFrame with the COLUMNS layout.

        Numeric columns must already be numeric (see load_drivers for the
        parsing of raw text).
        """
        missing = [c for c in COLUMNS if c not in df.columns]
        if missing:
            raise DataFormatError(f"Driver table is missing columns: {missing}")

        steps = []
        for position, row in enumerate(df.itertuples(index=False)):
            record = row._asdict()
            try:
                directions = Direction.parse_set(record["branchDirections"])
            except ValueError as e:
                raise DataFormatError(f"Row {position + 1}: {e}") from None
            steps.append(DriverStep(
                index=int(record["index"]),
                dR=float(record["dR"]),
                dPhiLeft=float(record["dPhiLeft"]),
                dPhiRight=float(record["dPhiRight"]),
                branchAngle=float(record["branchAngle"]),
                branchCount=int(record["branchCount"]),
                branchDirections=directions,
                repeatCount=int(record["repeatCount"]),
                repeatFromIndex=int(record["repeatFromIndex"]),
                width=float(record["width"]),
                colorR=float(record["colorR"]),
                colorG=float(record["colorG"]),
                colorB=float(record["colorB"]),
                luminosity=float(record["luminosity"]),
            ))
        return cls(steps)

    def to_frame(self) -> pd.DataFrame:
        """Table as a DataFrame with the COLUMNS layout."""
        rows = []
        for step in self._steps:
            row = {c: getattr(step, c) for c in COLUMNS}
            row["branchDirections"] = "".join(
                d.value for d in (Direction.LEFT, Direction.RIGHT)
                if d in step.branchDirections
            )
            rows.append(row)
        return pd.DataFrame(rows, columns=list(COLUMNS))


def _coerce_numeric(
    df: pd.DataFrame,
    on_bad_cell: str,
    source: str,
) -> pd.DataFrame:
    """Convert numeric columns, collecting every cell that is not a number."""
    df = df.copy()
    bad_cells = []

    for col in INT_COLUMNS + FLOAT_COLUMNS:
        raw = df[col]
        values = pd.to_numeric(raw, errors="coerce")
        # NaN and +/-inf
        bad = ~np.isfinite(values)
        if col in INT_COLUMNS:
            # 2.5 is not a valid branchCount; 2.0 is
            fractional = values.notna() & (values != np.floor(values))
            bad = bad | fractional
        for row_idx in np.flatnonzero(bad.to_numpy()):
            # +2: one for the header row, one for 1-based line numbers
            bad_cells.append(f"line {row_idx + 2}, column '{col}': {raw.iloc[row_idx]!r}")
        df[col] = values.where(~bad)

    if bad_cells:
        if on_bad_cell == "raise":
            raise DataFormatError(
                f"{source}: {len(bad_cells)} malformed cell(s): " + "; ".join(bad_cells)
            )
        logger.warning(
            "%s: replacing %d malformed cell(s) with 0: %s",
            source, len(bad_cells), "; ".join(bad_cells),
        )
        df[list(INT_COLUMNS + FLOAT_COLUMNS)] = df[list(INT_COLUMNS + FLOAT_COLUMNS)].fillna(0)

    for col in INT_COLUMNS:
        df[col] = df[col].astype(int)
    for col in FLOAT_COLUMNS:
        df[col] = df[col].astype(float)
    return df


def load_drivers(
    path,
    on_bad_cell: Literal["raise", "zero"] = "raise",
) -> DriverTable:
    """
    Read a tab-separated driver file into a DriverTable.

    Parameters:
    -----------
    path : str or os.PathLike
        Tab-separated file with one header row
    on_bad_cell : {'raise', 'zero'}
        What to do with non-numeric cells in numeric columns:
        - 'raise': raise DataFormatError (default)
        - 'zero': replace with 0 and log a warning

    Returns:
    --------
    DriverTable

    Raises:
    -------
    DataFormatError
        If the file has the wrong shape or contains malformed cells
    FileNotFoundError
        If the file does not exist
    """
    if on_bad_cell not in ("raise", "zero"):
        raise ValueError(f"Unknown on_bad_cell policy: {on_bad_cell!r}")

    source = os.fspath(path)
    try:
        df = pd.read_csv(
            path,
            sep="\t",
            # header row skipped, not parsed: a row with an extra field is a
            # tokenizer error instead of an implicit index column
            header=None,
            skiprows=1,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        raise DataFormatError(f"{source}: no data rows") from None
    except pd.errors.ParserError as e:
        raise DataFormatError(f"{source}: {e}") from None

    if df.shape[1] != len(COLUMNS):
        raise DataFormatError(
            f"{source}: expected {len(COLUMNS)} tab-separated columns, got {df.shape[1]}"
        )
    # The header row is discarded; columns are positional
    df.columns = list(COLUMNS)
    for col in df.columns:
        df[col] = df[col].str.strip()

    df = _coerce_numeric(df, on_bad_cell, source)
    table = DriverTable.from_frame(df)
    logger.debug("Loaded %d driver rows from %s (branch rows: %s)",
                 len(table), source, table.branch_rows)
    return table


def write_drivers(table: DriverTable, path) -> None:
    """Write a DriverTable in the tab-separated format read by load_drivers."""
    dirname = os.path.dirname(os.fspath(path))
    os.makedirs(dirname if dirname else '.', exist_ok=True)
    table.to_frame().to_csv(path, sep="\t", index=False)
