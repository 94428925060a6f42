# File: tests/test_drivers.py
"""
Test the driver table and its tab-separated loader.

WHAT WE CHECK:
--------------
- Header row is discarded, columns are positional
- Types: integer columns become ints, direction strings become sets
- Malformed cells raise DataFormatError by default
- on_bad_cell="zero" replaces them with 0 (and says so in the log)
- Structural validation: index order, repeat targets, column count
"""

import logging
from pathlib import Path

import pytest

from genfractal.drivers import (
    COLUMNS,
    DataFormatError,
    DriverTable,
    load_drivers,
    write_drivers,
)
from genfractal.model import Direction, DriverStep

HEADER = "s\tdR\tdPhi+\tdPhi-\tangle\tbranches\tdirs\trepeat\tfrom\twidth\tR\tG\tB\tlum"
SAMPLE = Path(__file__).parent.parent / "demos" / "data" / "drivers.txt"


def write_table(tmp_path, rows, header=HEADER, name="drivers.txt"):
    path = tmp_path / name
    path.write_text(header + "\n" + "\n".join(rows) + "\n")
    return path


def row(index, dR="1.0", dl="0.1", dr="-0.1", angle="0", count="0", dirs="",
        repeat="0", frm="0", width="0.5", r="200", g="100", b="50", lum="1.0"):
    return "\t".join(str(v) for v in
                     (index, dR, dl, dr, angle, count, dirs, repeat, frm, width, r, g, b, lum))


def test_load_basic_table(tmp_path):
    path = write_table(tmp_path, [
        row(0),
        row(1, dR="0.7", angle="0.5", count="2", dirs="LR"),
        row(2, repeat="3", frm="0"),
    ])
    table = load_drivers(path)

    assert len(table) == 3
    assert table[0].dR == 1.0
    assert table[1].branchCount == 2
    assert table[1].branchAngle == 0.5
    assert table[1].branchDirections == frozenset({Direction.LEFT, Direction.RIGHT})
    assert table[0].branchDirections == frozenset()
    assert table[2].repeatCount == 3
    assert isinstance(table[2].repeatCount, int)
    assert table.branch_rows == [1]
    print("✓ Driver table loaded: 3 rows, branch row 1")


def test_header_row_is_discarded(tmp_path):
    """Whatever the header says, the columns are read positionally."""
    path = write_table(tmp_path, [row(0)], header="a\tb\tc\td\te\tf\tg\th\ti\tj\tk\tl\tm\tn")
    table = load_drivers(path)
    assert len(table) == 1
    assert table[0].colorR == 200.0


def test_integer_cells_written_as_floats(tmp_path):
    """Spreadsheet exports may write 2.0 for an integer column."""
    path = write_table(tmp_path, [row(0, count="2.0", dirs="L")])
    assert load_drivers(path)[0].branchCount == 2


def test_direction_parsing_is_order_and_case_insensitive(tmp_path):
    path = write_table(tmp_path, [row(0, dirs="rl"), row(1, dirs="R"), row(2, dirs="l")])
    table = load_drivers(path)
    assert table[0].branchDirections == frozenset({Direction.LEFT, Direction.RIGHT})
    assert table[1].branchDirections == frozenset({Direction.RIGHT})
    assert table[2].branchDirections == frozenset({Direction.LEFT})


def test_non_numeric_cell_raises(tmp_path):
    path = write_table(tmp_path, [row(0), row(1, dR="abc")])
    with pytest.raises(DataFormatError, match="dR"):
        load_drivers(path)


def test_fractional_integer_cell_raises(tmp_path):
    path = write_table(tmp_path, [row(0, count="2.5")])
    with pytest.raises(DataFormatError, match="branchCount"):
        load_drivers(path)


def test_bad_cells_replaced_with_zero_when_lenient(tmp_path, caplog):
    path = write_table(tmp_path, [row(0), row(1, dR="abc", width="")])
    with caplog.at_level(logging.WARNING, logger="genfractal.drivers"):
        table = load_drivers(path, on_bad_cell="zero")

    assert table[1].dR == 0.0
    assert table[1].width == 0.0
    assert "2 malformed cell(s)" in caplog.text
    assert "'dR'" in caplog.text


def test_unknown_policy_rejected(tmp_path):
    path = write_table(tmp_path, [row(0)])
    with pytest.raises(ValueError):
        load_drivers(path, on_bad_cell="ignore")


def test_bad_direction_raises(tmp_path):
    path = write_table(tmp_path, [row(0, count="1", dirs="LX")])
    with pytest.raises(DataFormatError, match="direction"):
        load_drivers(path)


def test_wrong_column_count_raises(tmp_path):
    path = tmp_path / "short.txt"
    path.write_text("a\tb\tc\n0\t1.0\t0.1\n")
    with pytest.raises(DataFormatError, match="14"):
        load_drivers(path)


def test_empty_file_raises(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    with pytest.raises(DataFormatError):
        load_drivers(path)


def test_header_only_file_raises(tmp_path):
    path = write_table(tmp_path, [])
    with pytest.raises(DataFormatError, match="no data rows"):
        load_drivers(path)


@pytest.mark.parametrize("cells, column", [
    (dict(count="inf"), "branchCount"),
    (dict(repeat="-inf"), "repeatCount"),
    (dict(dR="inf"), "dR"),
    (dict(width="nan"), "width"),
])
def test_non_finite_cell_raises(tmp_path, cells, column):
    """inf/nan parse as numbers but are not valid driver values."""
    path = write_table(tmp_path, [row(0, **cells)])
    with pytest.raises(DataFormatError, match=column):
        load_drivers(path)


def test_non_finite_cells_zeroed_when_lenient(tmp_path, caplog):
    path = write_table(tmp_path, [row(0, count="inf", dR="inf")])
    with caplog.at_level(logging.WARNING, logger="genfractal.drivers"):
        table = load_drivers(path, on_bad_cell="zero")

    assert table[0].branchCount == 0
    assert table[0].dR == 0.0
    assert "2 malformed cell(s)" in caplog.text


def test_extra_field_in_one_row_raises(tmp_path):
    """A stray trailing field must not shift the columns of the table."""
    path = write_table(tmp_path, [row(0), row(1) + "\t9"])
    with pytest.raises(DataFormatError):
        load_drivers(path)


def test_extra_field_in_every_row_raises(tmp_path):
    path = write_table(tmp_path, [row(0) + "\t9", row(1) + "\t9"])
    with pytest.raises(DataFormatError, match="14"):
        load_drivers(path)


def test_slicing_is_rejected():
    table = DriverTable([DriverStep(0, 1.0, 0.0, 0.0), DriverStep(1, 1.0, 0.0, 0.0)])
    with pytest.raises(TypeError):
        table[1:]
    assert table[-1].index == 1


def test_non_contiguous_index_raises(tmp_path):
    path = write_table(tmp_path, [row(0), row(2)])
    with pytest.raises(DataFormatError, match="contiguous"):
        load_drivers(path)


def test_repeat_target_outside_table_raises():
    steps = [DriverStep(0, 1.0, 0.0, 0.0), DriverStep(1, 1.0, 0.0, 0.0, repeatCount=1, repeatFromIndex=5)]
    with pytest.raises(DataFormatError, match="outside the table"):
        DriverTable(steps)


def test_repeat_target_ignored_without_repeat():
    """A stale repeatFromIndex does not matter when repeatCount is 0."""
    table = DriverTable([DriverStep(0, 1.0, 0.0, 0.0, repeatFromIndex=99)])
    assert len(table) == 1


def test_table_is_immutable():
    table = DriverTable([DriverStep(0, 1.0, 0.0, 0.0)])
    with pytest.raises(Exception):  # dataclass.FrozenInstanceError
        table[0].dR = 2.0
    with pytest.raises(TypeError):
        table[0] = DriverStep(0, 2.0, 0.0, 0.0)


def test_write_then_load_preserves_rows(tmp_path):
    original = load_drivers(write_table(tmp_path, [
        row(0),
        row(1, count="3", dirs="L", angle="0.25"),
        row(2, repeat="2", frm="1", lum="0.5"),
    ]))
    out = tmp_path / "out" / "copy.txt"
    write_drivers(original, out)
    reloaded = load_drivers(out)
    assert list(reloaded) == list(original)


def test_to_frame_columns():
    df = DriverTable([DriverStep(0, 1.0, 0.0, 0.0, branchDirections=frozenset({Direction.RIGHT}))]).to_frame()
    assert list(df.columns) == list(COLUMNS)
    assert df.loc[0, "branchDirections"] == "R"


def test_sample_table_loads():
    table = load_drivers(SAMPLE)
    assert len(table) == 40
    assert table.branch_rows == [9, 19, 29]
