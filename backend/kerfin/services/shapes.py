"""
Value types exchanged between the components and the geometry kernel.

All geometry handled by the service is transient: each solve receives
fresh input objects and builds fresh outputs.  The classes below are
therefore small frozen dataclasses with a handful of convenience
helpers and no behaviour that mutates in place.

- :class:`Interval` describes a parametric domain.
- :class:`Surface` is a tensor‑product Bézier patch defined by a grid
  of control points and a U/V domain.  A plain rectangle is simply a
  2×2 grid.
- :class:`Curve` is a polyline (a degree‑1 curve) in 3D.
- :class:`Brep` is a planar region produced by the kernel, backed by a
  shapely polygon that may contain holes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon

Point = Tuple[float, float, float]

# Distance below which a curve's start and end are considered coincident.
CLOSURE_EPS = 1e-9


def as_point(value: Sequence[float]) -> Point:
    """Coerce a 2‑ or 3‑element sequence into a 3D point tuple.

    Raises:
        ValueError: If the sequence does not hold two or three finite
            numbers.
    """
    coords = [float(c) for c in value]
    if len(coords) == 2:
        coords.append(0.0)
    if len(coords) != 3:
        raise ValueError(f"Expected 2 or 3 coordinates, got {len(coords)}")
    if not all(math.isfinite(c) for c in coords):
        raise ValueError("Point coordinates must be finite")
    return (coords[0], coords[1], coords[2])


def distance(a: Point, b: Point) -> float:
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def midpoint(a: Point, b: Point) -> Point:
    mid = (np.asarray(a, dtype=float) + np.asarray(b, dtype=float)) / 2.0
    return (float(mid[0]), float(mid[1]), float(mid[2]))


@dataclass(frozen=True)
class Interval:
    """Closed parametric interval ``[lo, hi]``.

    ``lo`` may exceed ``hi`` for a decreasing domain; ``min``/``max``
    always return the ordered bounds.
    """

    lo: float
    hi: float

    @property
    def min(self) -> float:
        return min(self.lo, self.hi)

    @property
    def max(self) -> float:
        return max(self.lo, self.hi)

    @property
    def length(self) -> float:
        return self.hi - self.lo

    def parameter_at(self, t: float) -> float:
        """Map a normalised parameter ``t`` in ``[0, 1]`` into the interval."""
        return self.lo + t * (self.hi - self.lo)

    def normalized_parameter_at(self, value: float) -> float:
        """Inverse of :meth:`parameter_at`; degenerate intervals map to 0."""
        if self.length == 0.0:
            return 0.0
        return (value - self.lo) / (self.hi - self.lo)

    def overlaps(self, other: "Interval") -> bool:
        """Closed‑interval overlap test; touching end points count."""
        return not (self.max < other.min or self.min > other.max)

    @classmethod
    def from_sequence(cls, value: Sequence[float]) -> "Interval":
        lo, hi = (float(v) for v in value)
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise ValueError("Interval bounds must be finite")
        return cls(lo, hi)


def _bernstein(degree: int, t: float) -> np.ndarray:
    """Evaluate all Bernstein basis polynomials of ``degree`` at ``t``."""
    k = np.arange(degree + 1)
    coeffs = np.array([math.comb(degree, int(i)) for i in k], dtype=float)
    return coeffs * np.power(t, k) * np.power(1.0 - t, degree - k)


@dataclass(frozen=True)
class Surface:
    """Tensor‑product Bézier surface.

    Attributes:
        control_points: ``m`` rows (along U) of ``n`` points (along V).
            Both ``m`` and ``n`` must be at least two; the surface
            degree in each direction is one less than the count.
        u_domain: Parametric domain in the first direction.
        v_domain: Parametric domain in the second direction.
    """

    control_points: Tuple[Tuple[Point, ...], ...]
    u_domain: Interval = field(default_factory=lambda: Interval(0.0, 1.0))
    v_domain: Interval = field(default_factory=lambda: Interval(0.0, 1.0))

    def __post_init__(self) -> None:
        rows = len(self.control_points)
        if rows < 2:
            raise ValueError("A surface needs at least two rows of control points")
        cols = len(self.control_points[0])
        if cols < 2:
            raise ValueError("A surface needs at least two control points per row")
        if any(len(row) != cols for row in self.control_points):
            raise ValueError("Control point rows must all have the same length")

    @classmethod
    def from_grid(
        cls,
        grid: Sequence[Sequence[Sequence[float]]],
        u_domain: Sequence[float] = (0.0, 1.0),
        v_domain: Sequence[float] = (0.0, 1.0),
    ) -> "Surface":
        points = tuple(tuple(as_point(p) for p in row) for row in grid)
        return cls(points, Interval.from_sequence(u_domain), Interval.from_sequence(v_domain))

    @classmethod
    def rectangle(
        cls,
        width: float,
        height: float,
        u_domain: Sequence[float] | None = None,
        v_domain: Sequence[float] | None = None,
        z: float = 0.0,
    ) -> "Surface":
        """Planar rectangle in the XY plane with a corner at the origin.

        The domain defaults to the rectangle's own extents, so that
        parameters map one to one onto world coordinates.
        """
        grid = (
            ((0.0, 0.0, z), (0.0, height, z)),
            ((width, 0.0, z), (width, height, z)),
        )
        return cls.from_grid(
            grid,
            u_domain if u_domain is not None else (0.0, width),
            v_domain if v_domain is not None else (0.0, height),
        )

    @property
    def degree_u(self) -> int:
        return len(self.control_points) - 1

    @property
    def degree_v(self) -> int:
        return len(self.control_points[0]) - 1

    def domain(self, direction: int) -> Interval:
        """Return the domain for ``direction`` 0 (U) or 1 (V)."""
        if direction == 0:
            return self.u_domain
        if direction == 1:
            return self.v_domain
        raise ValueError(f"Surface direction must be 0 or 1, got {direction}")

    def reparameterized(
        self,
        u_domain: Interval = Interval(0.0, 1.0),
        v_domain: Interval = Interval(0.0, 1.0),
    ) -> "Surface":
        """Return a copy of the surface with new parametric domains."""
        return Surface(self.control_points, u_domain, v_domain)

    def point_at(self, u: float, v: float) -> Point:
        """Evaluate the surface at domain parameters ``(u, v)``."""
        ctrl = np.asarray(self.control_points, dtype=float)
        bu = _bernstein(self.degree_u, self.u_domain.normalized_parameter_at(u))
        bv = _bernstein(self.degree_v, self.v_domain.normalized_parameter_at(v))
        pt = np.einsum("i,ijk,j->k", bu, ctrl, bv)
        return (float(pt[0]), float(pt[1]), float(pt[2]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "controlPoints": [[list(p) for p in row] for row in self.control_points],
            "uDomain": [self.u_domain.lo, self.u_domain.hi],
            "vDomain": [self.v_domain.lo, self.v_domain.hi],
        }


@dataclass(frozen=True)
class Curve:
    """Polyline curve through an ordered list of 3D points."""

    points: Tuple[Point, ...]

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError("A curve needs at least two points")

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> "Curve":
        return cls(tuple(as_point(p) for p in points))

    @property
    def point_at_start(self) -> Point:
        return self.points[0]

    @property
    def point_at_end(self) -> Point:
        return self.points[-1]

    @property
    def is_closed(self) -> bool:
        return len(self.points) > 2 and distance(self.points[0], self.points[-1]) <= CLOSURE_EPS

    @property
    def signed_area(self) -> float:
        """Shoelace area of the XY projection; positive when counter‑clockwise."""
        xy = np.asarray([(p[0], p[1]) for p in self.points], dtype=float)
        x, y = xy[:, 0], xy[:, 1]
        return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))

    def reversed(self) -> "Curve":
        return Curve(tuple(reversed(self.points)))

    def to_dict(self) -> Dict[str, Any]:
        return {"points": [list(p) for p in self.points], "closed": self.is_closed}


@dataclass(frozen=True)
class Brep:
    """Planar region bounded by a shapely polygon at elevation ``z``."""

    polygon: Polygon
    z: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        exterior: List[List[float]] = [[x, y, self.z] for x, y in self.polygon.exterior.coords]
        holes = [
            [[x, y, self.z] for x, y in ring.coords]
            for ring in self.polygon.interiors
        ]
        return {
            "exterior": exterior,
            "holes": holes,
            "z": self.z,
            "area": float(self.polygon.area),
        }
