"""
Capability interface for the geometry kernel.

The components never talk to a geometry library directly.  Everything
they need (offsetting, joining, splitting, area, surface evaluation and
line construction) goes through an object satisfying
:class:`GeometryKernel`.  The production implementation lives in
:mod:`kerfin.services.planar_kernel`; tests substitute a deterministic
fake that returns predictable results.
"""

from __future__ import annotations

from typing import List, Literal, Protocol, Sequence

from .shapes import Brep, Curve, Point, Surface

CornerStyle = Literal["sharp", "round"]


class GeometryKernel(Protocol):
    """Operations the components require from a geometry engine."""

    def offset_curve(
        self,
        curve: Curve,
        distance: float,
        tolerance: float,
        corner_style: CornerStyle = "sharp",
    ) -> List[Curve]:
        """Offset ``curve`` in the world XY plane.

        Positive distances offset to the left of the curve direction.
        An empty list signals that no offset could be produced.
        """
        ...

    def join_curves(self, curves: Sequence[Curve], tolerance: float) -> List[Curve]:
        """Join curves whose end points lie within ``tolerance``."""
        ...

    def surface_to_brep(self, surface: Surface) -> Brep:
        ...

    def split_brep(self, brep: Brep, cutters: Sequence[Curve], tolerance: float) -> List[Brep]:
        """Split ``brep`` with closed cutter curves into its sub‑regions.

        An empty list means the cutters produced no region at all.
        """
        ...

    def area(self, brep: Brep) -> float:
        ...

    def point_at(self, surface: Surface, u: float, v: float) -> Point:
        ...

    def line(self, start: Point, end: Point) -> Curve:
        ...
