"""
Kerfing pattern generators.

Two generators lay out cut patterns in a surface's parameter space and
evaluate them on the surface, so the resulting curves follow the
surface rather than a flat projection of it.

Straight lines
    Rows of rectangles separated by a gap along the surface's second
    (V) direction.  Odd rows are shifted by half a rectangle length to
    produce a brick‑like pattern.  Within a row, rectangles alternate
    with empty stretches of the same length along U.

Zig‑zag
    A checkerboard of quads over a ``uDiv × vDiv`` point grid.  Each
    "even" quad receives four segments joining its corners to the
    midpoints of its two U‑running edges.

Both functions are pure: they take a kernel, a surface and numbers and
return a fresh list of curves.  Invalid straight‑line parameters raise
:class:`~kerfin.services.data_access.PatternError`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..config import get_settings
from .data_access import PatternError
from .kernel import GeometryKernel
from .shapes import Curve, Interval, Point, Surface, midpoint

logger = logging.getLogger(__name__)

UNIT_INTERVAL = Interval(0.0, 1.0)


def round_count(value: float) -> int:
    """Round a numeric count parameter to an integer (half to even)."""
    return int(round(value))


@dataclass(frozen=True)
class PatternRow:
    """Placement of one row of rectangles in parameter space."""

    index: int
    v: float
    shift: float
    occupied: Interval


def band_height(v_length: float, num_lines: int, gap: float) -> float:
    """Height of each band once ``num_lines - 1`` gaps are removed."""
    return (v_length - (num_lines - 1) * gap) / num_lines


def layout_rows(
    v_domain: Interval,
    num_lines: int,
    rect_width: float,
    rect_length: float,
    gap: float,
) -> List[PatternRow]:
    """Compute the row placements for the straight‑line pattern.

    Rows advance by the constant step ``dy + gap`` and all share the
    same width, so a row can only overlap an earlier one if it overlaps
    its immediate predecessor.

    Raises:
        PatternError: If two rows' occupied intervals overlap.
    """
    dy = band_height(v_domain.length, num_lines, gap)
    shift = rect_length / 2.0
    rows: List[PatternRow] = []
    for i in range(num_lines):
        v = v_domain.min + i * (dy + gap)
        occupied = Interval(v, v + rect_width)
        if rows and occupied.overlaps(rows[-1].occupied):
            raise PatternError(
                "Rectangles are intersecting due to increased rectWidth. Adjust the values."
            )
        rows.append(PatternRow(index=i, v=v, shift=0.0 if i % 2 == 0 else shift, occupied=occupied))
    return rows


def _check_budget(count: float, max_curves: Optional[int]) -> None:
    limit = get_settings().max_pattern_curves if max_curves is None else max_curves
    if count > limit:
        raise PatternError(f"Pattern would produce more than {limit} curves. Adjust the values.")


def rectangles_in_row(u_domain: Interval, shift: float, rect_length: float) -> float:
    """Number of rectangles a row holds, as a float so huge counts stay finite."""
    span = u_domain.max - (u_domain.min + shift)
    if span < 0.0:
        return 0.0
    ratio = span / (2.0 * rect_length)
    if not math.isfinite(ratio):
        return math.inf
    return math.floor(ratio) + 1.0


def straight_line_pattern(
    kernel: GeometryKernel,
    surface: Surface,
    num_lines: int,
    rect_width: float,
    rect_length: float,
    gap: float,
    max_curves: Optional[int] = None,
) -> List[Curve]:
    """Generate the straight‑line kerfing pattern on ``surface``.

    Args:
        kernel: Kernel used to evaluate surface points.
        surface: Surface carrying the pattern.
        num_lines: Number of rows.
        rect_width: Rectangle extent along V.
        rect_length: Rectangle extent along U.
        gap: Distance between consecutive rows along V.
        max_curves: Upper bound on the number of rectangles; defaults to
            the configured ``KERFIN_MAX_PATTERN_CURVES``.

    Returns:
        Closed rectangular curves, row by row.

    Raises:
        PatternError: For a non‑positive row count or rectangle length,
            a rectangle width not smaller than the gap, overlapping rows
            or a pattern larger than ``max_curves``.
    """
    if num_lines < 1:
        raise PatternError("Number of lines must be at least 1.")
    if rect_width >= gap:
        raise PatternError("rectWidth must be smaller than gap.")
    if rect_length <= 0.0:
        raise PatternError("rectLength must be positive.")
    _check_budget(num_lines, max_curves)

    u_domain = surface.domain(0)
    rows = layout_rows(surface.domain(1), num_lines, rect_width, rect_length, gap)
    _check_budget(sum(rectangles_in_row(u_domain, row.shift, rect_length) for row in rows), max_curves)
    dx = rect_length
    curves: List[Curve] = []
    for row in rows:
        v0, v1 = row.v, row.v + rect_width
        k = 0
        while True:
            u1 = u_domain.min + row.shift + k * 2.0 * dx
            if u1 > u_domain.max:
                break
            u2 = min(u1 + dx, u_domain.max)
            p0 = kernel.point_at(surface, u1, v0)
            p1 = kernel.point_at(surface, u2, v0)
            p2 = kernel.point_at(surface, u2, v1)
            p3 = kernel.point_at(surface, u1, v1)
            curves.append(Curve((p0, p1, p2, p3, p0)))
            k += 1
    logger.debug(
        "straight_line_pattern: rows=%d dy=%.6g rectangles=%d",
        len(rows),
        band_height(surface.domain(1).length, num_lines, gap),
        len(curves),
    )
    return curves


def divide_surface(kernel: GeometryKernel, surface: Surface, u_div: int, v_div: int) -> List[List[Point]]:
    """Evaluate a ``u_div × v_div`` grid of points spanning the surface domain."""
    u_domain, v_domain = surface.domain(0), surface.domain(1)
    grid: List[List[Point]] = []
    for i in range(u_div):
        u = u_domain.parameter_at(i / (u_div - 1))
        grid.append([
            kernel.point_at(surface, u, v_domain.parameter_at(j / (v_div - 1)))
            for j in range(v_div)
        ])
    return grid


def zigzag_pattern(
    kernel: GeometryKernel,
    surface: Surface,
    u_div: int,
    v_div: int,
    max_curves: Optional[int] = None,
) -> List[Curve]:
    """Generate the zig‑zag kerfing pattern on ``surface``.

    The surface is reparameterised to the unit square before the grid
    is built.  Fewer than two divisions in either direction leave no
    quads and therefore no curves.  A grid that would yield more than
    ``max_curves`` segments raises :class:`PatternError`.
    """
    if u_div < 2 or v_div < 2:
        return []
    # Four segments for every other quad of the (u_div - 1) x (v_div - 1) grid.
    _check_budget(4 * (((u_div - 1) * (v_div - 1) + 1) // 2), max_curves)
    unit = surface.reparameterized(UNIT_INTERVAL, UNIT_INTERVAL)
    grid = divide_surface(kernel, unit, u_div, v_div)

    curves: List[Curve] = []
    for i in range(u_div - 1):
        for j in range(v_div - 1):
            if (i + j) % 2 != 0:
                continue
            a = grid[i][j]
            b = grid[i][j + 1]
            c = grid[i + 1][j + 1]
            d = grid[i + 1][j]
            x = midpoint(a, d)
            y = midpoint(b, c)
            curves.append(kernel.line(a, x))
            curves.append(kernel.line(b, x))
            curves.append(kernel.line(c, y))
            curves.append(kernel.line(d, y))
    return curves

