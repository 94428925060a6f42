# genfractal/kernel/overlay.py
"""
REPEAT OVERLAY: Per-Branch Repeat Counters on an Immutable Table
================================================================

PURPOSE:
--------
A repeat row sends the walk back to an earlier row while its counter is
nonzero, and every visit decrements the counter. The counters therefore
change during a walk, but the driver table itself is frozen.

The overlay stores only the counters a branch has touched:

    overlay[s]  ->  remaining count if this lineage has touched row s
                ->  table[s].repeatCount otherwise

At a fork every child gets its own snapshot(). Snapshots copy the small
dict of touched rows, never the table, and are taken before any sibling
runs. One branch's decrements can therefore never leak into a sibling.

USAGE:
------
    overlay = RepeatOverlay(table)
    if overlay[s] != 0:
        overlay.decrement(s)
    child = overlay.snapshot()
"""

from typing import Dict, Sequence


class RepeatOverlay:
    """
    Sparse mapping from step index to remaining repeat count.

    Parameters:
    -----------
    base : Sequence
        Rows exposing a `repeatCount` attribute (a DriverTable or a list
        of DriverStep)
    counts : Dict[int, int], optional
        Counters already touched by this lineage
    """

    __slots__ = ("_base", "_counts")

    def __init__(self, base: Sequence, counts: Dict[int, int] = None):
        self._base = base
        self._counts = dict(counts) if counts else {}

    def __getitem__(self, s: int) -> int:
        if s in self._counts:
            return self._counts[s]
        return self._base[s].repeatCount

    def __setitem__(self, s: int, value: int) -> None:
        self._counts[s] = int(value)

    def decrement(self, s: int) -> int:
        """Decrement the counter of row s and return the new value."""
        self[s] = self[s] - 1
        return self._counts[s]

    def snapshot(self) -> "RepeatOverlay":
        """Independent copy sharing the same immutable base table."""
        return RepeatOverlay(self._base, self._counts)

    def touched(self) -> Dict[int, int]:
        """Copy of the counters this lineage has modified."""
        return dict(self._counts)

    def __repr__(self) -> str:
        return f"RepeatOverlay(touched={self._counts})"
