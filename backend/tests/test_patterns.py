"""
Tests for the straight-line and zig-zag pattern generators.

All tests run against the deterministic fake kernel, whose surface
evaluation returns ``(u, v, 0)``.  Generated rectangle corners are
therefore the parameter-space placements themselves, which makes the
layout arithmetic directly observable.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from kerfin.services.data_access import PatternError
from kerfin.services.patterns import (
    band_height,
    layout_rows,
    rectangles_in_row,
    round_count,
    straight_line_pattern,
    zigzag_pattern,
)
from kerfin.services.shapes import Interval, Surface

from fakes import FakeKernel


@pytest.fixture
def kernel() -> FakeKernel:
    return FakeKernel()


@pytest.fixture
def square() -> Surface:
    return Surface.rectangle(10.0, 10.0)


@pytest.mark.parametrize(
    "v_length,num_lines,gap",
    [(10.0, 1, 3.0), (10.0, 2, 3.0), (25.0, 4, 1.5), (7.0, 7, 0.25)],
)
def test_band_height_formula(v_length: float, num_lines: int, gap: float) -> None:
    rows = layout_rows(Interval(0.0, v_length), num_lines, 0.1, 1.0, gap)
    dy = band_height(v_length, num_lines, gap)
    assert dy == pytest.approx((v_length - (num_lines - 1) * gap) / num_lines)
    assert len(rows) == num_lines
    for row in rows:
        assert row.v == pytest.approx(row.index * (dy + gap))


def test_rect_width_not_smaller_than_gap_is_rejected(kernel: FakeKernel, square: Surface) -> None:
    for width in (3.0, 4.0):
        with pytest.raises(PatternError, match="smaller than gap"):
            straight_line_pattern(kernel, square, 2, width, 2.0, 3.0)


def test_overlapping_rows_are_rejected(kernel: FakeKernel) -> None:
    """Too many rows squeeze the bands until consecutive rows overlap."""
    srf = Surface.rectangle(10.0, 1.0)
    # dy = (1 - 4 * 0.5) / 5 = -0.2, so rows advance by 0.3 < rectWidth 0.4.
    with pytest.raises(PatternError, match="intersecting"):
        straight_line_pattern(kernel, srf, 5, 0.4, 1.0, 0.5)


def test_invalid_counts_and_lengths_are_rejected(kernel: FakeKernel, square: Surface) -> None:
    with pytest.raises(PatternError):
        straight_line_pattern(kernel, square, 0, 1.0, 2.0, 3.0)
    with pytest.raises(PatternError):
        straight_line_pattern(kernel, square, 2, 1.0, 0.0, 3.0)


def test_straight_lines_end_to_end(kernel: FakeKernel, square: Surface) -> None:
    """U=[0,10], V=[0,10], 2 lines, width 1, length 2, gap 3."""
    rows = layout_rows(square.domain(1), 2, 1.0, 2.0, 3.0)
    assert [r.v for r in rows] == pytest.approx([0.0, 6.5])
    assert [r.shift for r in rows] == [0.0, 1.0]

    curves = straight_line_pattern(kernel, square, 2, 1.0, 2.0, 3.0)
    assert all(c.is_closed for c in curves)
    spans = [(c.points[0][0], c.points[1][0], c.points[0][1], c.points[2][1]) for c in curves]
    assert spans == [
        (0.0, 2.0, 0.0, 1.0),
        (4.0, 6.0, 0.0, 1.0),
        (8.0, 10.0, 0.0, 1.0),
        (1.0, 3.0, 6.5, 7.5),
        (5.0, 7.0, 6.5, 7.5),
        # Last rectangle of the shifted row is clipped to the domain.
        (9.0, 10.0, 6.5, 7.5),
    ]


def test_straight_lines_respect_domain_offset(kernel: FakeKernel) -> None:
    srf = Surface.rectangle(4.0, 4.0, u_domain=(10.0, 14.0), v_domain=(-2.0, 2.0))
    curves = straight_line_pattern(kernel, srf, 1, 0.5, 1.0, 1.0)
    assert curves[0].points[0] == (10.0, -2.0, 0.0)
    assert [c.points[0][0] for c in curves] == [10.0, 12.0, 14.0]


def test_round_count_half_to_even() -> None:
    assert round_count(2.4) == 2
    assert round_count(2.5) == 2
    assert round_count(3.5) == 4


@pytest.mark.parametrize("u_div,v_div", [(2, 2), (3, 3), (4, 5), (6, 2), (7, 7)])
def test_zigzag_segment_count(kernel: FakeKernel, square: Surface, u_div: int, v_div: int) -> None:
    curves = zigzag_pattern(kernel, square, u_div, v_div)
    even = sum(1 for i in range(u_div - 1) for j in range(v_div - 1) if (i + j) % 2 == 0)
    assert len(curves) == 4 * even
    assert not any(c.is_closed for c in curves)


def test_zigzag_quad_segments_meet_midpoints(kernel: FakeKernel, square: Surface) -> None:
    """On the unit-reparameterised grid the first quad spans [0, 0.5]²."""
    curves = zigzag_pattern(kernel, square, 3, 3)
    a_x, b_x, c_y, d_y = curves[:4]
    assert a_x.points == ((0.0, 0.0, 0.0), (0.25, 0.0, 0.0))
    assert b_x.points == ((0.0, 0.5, 0.0), (0.25, 0.0, 0.0))
    assert c_y.points == ((0.5, 0.5, 0.0), (0.25, 0.5, 0.0))
    assert d_y.points == ((0.5, 0.0, 0.0), (0.25, 0.5, 0.0))


def test_zigzag_needs_two_divisions(kernel: FakeKernel, square: Surface) -> None:
    assert zigzag_pattern(kernel, square, 1, 5) == []
    assert zigzag_pattern(kernel, square, 5, 0) == []


def test_rectangles_in_row_counts_alternating_slots() -> None:
    u_domain = Interval(0.0, 10.0)
    # Starts at 0, 4 and 8 for an unshifted row; 1, 5 and 9 when shifted.
    assert rectangles_in_row(u_domain, 0.0, 2.0) == 3
    assert rectangles_in_row(u_domain, 1.0, 2.0) == 3
    assert rectangles_in_row(u_domain, 11.0, 2.0) == 0


def test_straight_lines_respect_curve_limit(kernel: FakeKernel, square: Surface) -> None:
    assert len(straight_line_pattern(kernel, square, 2, 1.0, 2.0, 3.0, max_curves=6)) == 6
    with pytest.raises(PatternError, match="more than 5 curves"):
        straight_line_pattern(kernel, square, 2, 1.0, 2.0, 3.0, max_curves=5)
    # Rejected from the counts alone, before any rectangle is built.
    with pytest.raises(PatternError, match="more than"):
        straight_line_pattern(kernel, square, 2, 1.0, 1e-9, 3.0)
    with pytest.raises(PatternError, match="more than"):
        straight_line_pattern(kernel, square, 10**9, 0.0, 1.0, 1e-12)


def test_zigzag_respects_curve_limit(kernel: FakeKernel, square: Surface) -> None:
    assert len(zigzag_pattern(kernel, square, 3, 3, max_curves=8)) == 8
    with pytest.raises(PatternError, match="more than 7 curves"):
        zigzag_pattern(kernel, square, 3, 3, max_curves=7)
    with pytest.raises(PatternError, match="more than"):
        zigzag_pattern(kernel, square, 10**6, 10**6)
