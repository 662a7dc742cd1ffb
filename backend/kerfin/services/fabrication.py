"""
CNC and laser fabrication transforms.

Both transforms turn a set of pattern curves into closed cut loops by
offsetting every curve to both sides, bridging the offset ends with
straight segments and joining the result into a single loop.  The
loops are then used to split the stock surface, and the largest
remaining region is reported as the leftover stock.

The only difference between the two is the effective offset: a CNC
router removes material with a bit of finite diameter, so half the bit
diameter is added to the requested offset, whereas a laser beam is
treated as having no width.

Curves that do not yield a closed loop are dropped from the loop list.
They do not abort the batch; their indices are recorded on the result
so that callers can report them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .kernel import GeometryKernel
from .shapes import Brep, Curve, Surface

logger = logging.getLogger(__name__)


@dataclass
class FabricationResult:
    """Closed cut loops plus the remaining stock region.

    Attributes:
        loops: Closed loops, in the order of the curves they came from.
        remaining: Largest region after splitting, or ``None`` when every
            candidate region has zero area.
        dropped: Indices of input curves that did not produce a loop.
    """

    loops: List[Curve] = field(default_factory=list)
    remaining: Optional[Brep] = None
    dropped: List[int] = field(default_factory=list)


def cnc_effective_offset(drill_bit_diameter: float, offset_distance: float) -> float:
    """Tool radius compensation plus the requested clearance."""
    return drill_bit_diameter / 2.0 + offset_distance


def laser_effective_offset(offset_distance: float) -> float:
    return offset_distance


def build_offset_loop(
    kernel: GeometryKernel,
    curve: Curve,
    distance: float,
    tolerance: float,
) -> Optional[Curve]:
    """Build the closed loop surrounding ``curve`` at ``distance``.

    Returns ``None`` when either offset fails, when the join produces
    nothing or when the first joined curve is not closed.

    A closed curve already bounds the material it marks, so its loop is
    the outward offset alone, whichever way the curve winds.
    """
    if curve.is_closed:
        # Positive offsets go left, which is inward for a counter-clockwise curve.
        outward = -distance if curve.signed_area > 0.0 else distance
        offsets = kernel.offset_curve(curve, outward, tolerance, "sharp")
        if not offsets or not offsets[0].is_closed:
            return None
        return offsets[0]
    positive = kernel.offset_curve(curve, distance, tolerance, "sharp")
    negative = kernel.offset_curve(curve, -distance, tolerance, "sharp")
    if not positive or not negative:
        return None
    pos, neg = positive[0], negative[0]
    start_bridge = kernel.line(pos.point_at_start, neg.point_at_start)
    end_bridge = kernel.line(pos.point_at_end, neg.point_at_end)
    joined = kernel.join_curves([pos, neg, start_bridge, end_bridge], tolerance)
    if not joined or not joined[0].is_closed:
        return None
    return joined[0]


def select_largest_region(kernel: GeometryKernel, regions: Sequence[Optional[Brep]]) -> Optional[Brep]:
    """Pick the region with strictly maximal area.

    Ties keep the first region encountered; regions without positive
    area are never selected.
    """
    largest: Optional[Brep] = None
    max_area = 0.0
    for region in regions:
        if region is None:
            continue
        area = kernel.area(region)
        if area > max_area:
            max_area = area
            largest = region
    return largest


def fabricate(
    kernel: GeometryKernel,
    surface: Surface,
    curves: Sequence[Optional[Curve]],
    distance: float,
    tolerance: float,
) -> FabricationResult:
    """Run the shared offset/join/split pipeline.

    Args:
        kernel: Geometry kernel used for every geometric operation.
        surface: Stock surface to split.
        curves: Pattern curves; ``None`` entries are skipped silently.
        distance: Effective offset distance applied to each side.
        tolerance: Kernel tolerance for offsetting, joining and splitting.
    """
    result = FabricationResult()
    for idx, curve in enumerate(curves):
        if curve is None:
            continue
        loop = build_offset_loop(kernel, curve, distance, tolerance)
        if loop is None:
            result.dropped.append(idx)
            continue
        result.loops.append(loop)

    brep = kernel.surface_to_brep(surface)
    regions = kernel.split_brep(brep, result.loops, tolerance) if result.loops else [brep]
    result.remaining = select_largest_region(kernel, regions)
    logger.debug(
        "fabricate: distance=%s curves=%d loops=%d dropped=%d regions=%d",
        distance,
        len(curves),
        len(result.loops),
        len(result.dropped),
        len(regions),
    )
    return result
