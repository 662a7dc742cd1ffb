"""
Concrete geometry kernel backed by numpy and shapely.

``ShapelyKernel`` satisfies :class:`~kerfin.services.kernel.GeometryKernel`
for planar fabrication work.  Curve offsets, splitting and areas are
computed in the world XY plane, mirroring how sheet material is laid
out on a CNC bed or laser table; elevations are carried along but do
not participate in the planar operations.  Surface evaluation uses the
surface's own Bézier evaluation, so pattern curves follow curved
surfaces faithfully in 3D.

All heavy lifting (offset self‑intersection handling, noding and face
extraction) is delegated to GEOS through shapely.  This module only
converts between the service's value types and shapely geometries.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np
import shapely
from shapely.errors import GEOSException
from shapely.geometry import LinearRing, LineString, MultiPolygon, Polygon
from shapely.geometry.polygon import orient
from shapely.ops import polygonize, snap, unary_union

from ..config import get_settings
from .kernel import CornerStyle
from .shapes import Brep, Curve, Point, Surface
from .shapes import distance as point_distance

logger = logging.getLogger(__name__)

_JOIN_STYLES = {"sharp": "mitre", "round": "round"}


def _to_linestring(curve: Curve) -> LineString:
    return LineString([(p[0], p[1]) for p in curve.points])


def _attach(points: List[Point], candidate: Curve, tolerance: float) -> Optional[List[Point]]:
    """Try to extend the chain ``points`` with ``candidate``.

    Returns the extended chain or ``None`` when neither end of the
    candidate lies within ``tolerance`` of either end of the chain.
    """
    start, end = points[0], points[-1]
    cand = list(candidate.points)
    if point_distance(end, cand[0]) <= tolerance:
        return points + cand[1:]
    if point_distance(end, cand[-1]) <= tolerance:
        return points + cand[::-1][1:]
    if point_distance(start, cand[-1]) <= tolerance:
        return cand[:-1] + points
    if point_distance(start, cand[0]) <= tolerance:
        return cand[::-1][:-1] + points
    return None


class ShapelyKernel:
    """Planar geometry kernel.

    Args:
        boundary_samples: Number of samples taken along each surface edge
            when converting a surface to a planar region.  Defaults to the
            configured ``KERFIN_BOUNDARY_SAMPLES``.
    """

    def __init__(self, boundary_samples: Optional[int] = None) -> None:
        if boundary_samples is None:
            boundary_samples = get_settings().boundary_samples
        if boundary_samples < 2:
            raise ValueError("boundary_samples must be at least 2")
        self.boundary_samples = boundary_samples

    def offset_curve(
        self,
        curve: Curve,
        distance: float,
        tolerance: float,
        corner_style: CornerStyle = "sharp",
    ) -> List[Curve]:
        if abs(distance) <= tolerance:
            return []
        if curve.is_closed:
            return self._offset_closed(curve, distance, tolerance, corner_style)
        z = curve.point_at_start[2]
        try:
            result = _to_linestring(curve).offset_curve(
                distance, join_style=_JOIN_STYLES[corner_style]
            )
        except (GEOSException, ValueError) as exc:
            logger.debug("offset_curve: GEOS rejected offset d=%s: %s", distance, exc)
            return []
        if result.is_empty:
            return []
        if distance < 0 and isinstance(result, LineString) and shapely.geos_version < (3, 11, 0):
            # GEOS before 3.11 returns right-hand offsets reversed.
            result = LineString(result.coords[::-1])
        parts = getattr(result, "geoms", [result])
        curves: List[Curve] = []
        for part in parts:
            coords = list(part.coords)
            if len(coords) < 2 or part.length <= tolerance:
                continue
            curves.append(Curve(tuple((float(x), float(y), z) for x, y in coords)))
        return curves

    def _offset_closed(
        self,
        curve: Curve,
        distance: float,
        tolerance: float,
        corner_style: CornerStyle,
    ) -> List[Curve]:
        """Offset a closed curve as the boundary of the region it encloses.

        The results are closed and keep the winding of ``curve``.  An
        inward offset that splits the region yields one curve per piece.
        """
        z = curve.point_at_start[2]
        try:
            ring = LinearRing([(p[0], p[1]) for p in curve.points])
            # The left side of a counter-clockwise ring is its interior.
            ccw = ring.is_ccw
            region = Polygon(ring).buffer(
                -distance if ccw else distance, join_style=_JOIN_STYLES[corner_style]
            )
        except (GEOSException, ValueError) as exc:
            logger.debug("offset_curve: GEOS rejected closed offset d=%s: %s", distance, exc)
            return []
        curves: List[Curve] = []
        for part in getattr(region, "geoms", [region]):
            if part.is_empty:
                continue
            exterior = orient(part, sign=1.0 if ccw else -1.0).exterior
            if exterior.length <= tolerance:
                continue
            curves.append(Curve(tuple((float(x), float(y), z) for x, y in exterior.coords)))
        return curves

    def join_curves(self, curves: Sequence[Curve], tolerance: float) -> List[Curve]:
        pending = [c for c in curves if c is not None]
        joined: List[Curve] = []
        while pending:
            current = pending.pop(0)
            if current.is_closed:
                joined.append(current)
                continue
            points = list(current.points)
            extended = True
            # Keep chaining until nothing attaches or the chain closes on itself.
            while extended and not (len(points) > 2 and point_distance(points[0], points[-1]) <= tolerance):
                extended = False
                for idx, candidate in enumerate(pending):
                    if candidate.is_closed:
                        continue
                    merged = _attach(points, candidate, tolerance)
                    if merged is not None:
                        points = merged
                        pending.pop(idx)
                        extended = True
                        break
            if len(points) > 2 and point_distance(points[0], points[-1]) <= tolerance:
                points[-1] = points[0]
            joined.append(Curve(tuple(points)))
        return joined

    def _boundary_points(self, surface: Surface) -> List[Point]:
        u_dom, v_dom = surface.u_domain, surface.v_domain
        ts = np.linspace(0.0, 1.0, self.boundary_samples)
        pts: List[Point] = []
        # Walk the four edges counter‑clockwise in parameter space without
        # repeating the shared corners.
        pts.extend(surface.point_at(u_dom.parameter_at(t), v_dom.lo) for t in ts[:-1])
        pts.extend(surface.point_at(u_dom.hi, v_dom.parameter_at(t)) for t in ts[:-1])
        pts.extend(surface.point_at(u_dom.parameter_at(t), v_dom.hi) for t in ts[::-1][:-1])
        pts.extend(surface.point_at(u_dom.lo, v_dom.parameter_at(t)) for t in ts[::-1][:-1])
        return pts

    def surface_to_brep(self, surface: Surface) -> Brep:
        pts = self._boundary_points(surface)
        polygon = Polygon([(p[0], p[1]) for p in pts])
        if not polygon.is_valid:
            repaired = polygon.buffer(0)
            if isinstance(repaired, MultiPolygon):
                repaired = max(repaired.geoms, key=lambda g: g.area)
            logger.debug(
                "surface_to_brep: repaired invalid footprint (area %.6g -> %.6g)",
                polygon.area,
                repaired.area,
            )
            polygon = repaired
        z = float(np.mean([p[2] for p in pts]))
        return Brep(polygon=polygon, z=z)

    def split_brep(self, brep: Brep, cutters: Sequence[Curve], tolerance: float) -> List[Brep]:
        if not cutters:
            return [brep]
        boundary = brep.polygon.boundary
        lines = [snap(_to_linestring(c), boundary, tolerance) for c in cutters]
        noded = unary_union([boundary, *lines])
        pieces: List[Brep] = []
        for face in polygonize(getattr(noded, "geoms", [noded])):
            # Faces inside holes of the original region, or outside it
            # altogether, are not part of the split result.
            if brep.polygon.covers(face.representative_point()):
                pieces.append(Brep(polygon=face, z=brep.z))
        logger.debug("split_brep: %d cutters produced %d faces", len(cutters), len(pieces))
        return pieces

    def area(self, brep: Brep) -> float:
        return float(brep.polygon.area)

    def point_at(self, surface: Surface, u: float, v: float) -> Point:
        return surface.point_at(u, v)

    def line(self, start: Point, end: Point) -> Curve:
        return Curve((start, end))
