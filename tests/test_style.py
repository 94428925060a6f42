# File: tests/test_style.py
"""
Test color resolution (RGB x luminosity, rounded and clamped to a byte).
"""

import numpy as np
import pytest

from genfractal.model import DriverStep, Segment
from genfractal.kernel.style import resolve_color, to_hex


def make_step(r, g, b, lum):
    return DriverStep(0, 1.0, 0.0, 0.0, colorR=r, colorG=g, colorB=b, luminosity=lum)


def test_luminosity_halves_channel():
    """colorR=200, luminosity=0.5 -> R=100."""
    assert resolve_color(make_step(200, 0, 0, 0.5))[0] == 100
    print("✓ 200 x 0.5 = 100")


def test_full_channel_stays_at_255():
    """colorR=255, luminosity=1.0 -> R=255 (no overflow)."""
    assert resolve_color(make_step(255, 255, 255, 1.0)) == (255, 255, 255)


def test_clamped_above_255():
    assert resolve_color(make_step(200, 100, 255, 2.0)) == (255, 200, 255)


def test_clamped_below_zero():
    assert resolve_color(make_step(100, 50, 0, -1.0)) == (0, 0, 0)


def test_rounding_not_truncation():
    """Halves round to even (50.5 -> 50, 49.5 -> 50, 3.5 -> 4); 6.65 -> 7, not 6."""
    r, g, b = resolve_color(make_step(101, 99, 7, 0.5))
    assert (r, g, b) == (50, 50, 4)
    assert resolve_color(make_step(7, 0, 0, 0.95))[0] == 7


def test_channels_are_python_ints():
    rgb = resolve_color(make_step(10, 20, 30, 1.0))
    assert all(type(c) is int for c in rgb)


@pytest.mark.parametrize("rgb, expected", [
    ((0, 0, 0), "#000000"),
    ((255, 255, 255), "#FFFFFF"),
    ((139, 90, 43), "#8B5A2B"),
])
def test_hex_format(rgb, expected):
    assert to_hex(rgb) == expected


def test_segment_hex_color():
    p = np.zeros(2)
    seg = Segment(p, p, p, p, p, p, color=(255, 0, 16), step=0)
    assert seg.hex_color == "#FF0010"
