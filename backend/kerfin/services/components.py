"""
Component definitions.

A component couples display metadata and ordered parameter
declarations with a solver function.  Solvers receive a
:class:`~kerfin.services.data_access.DataAccess` for the current
invocation and the geometry kernel; they read inputs by position, call
into :mod:`fabrication` or :mod:`patterns` and write outputs back by
position.

:func:`solve_component` runs a solver and folds its outcome into a
:class:`~kerfin.services.data_access.SolveResult`:

- missing inputs (``MissingInputError``) → ``skipped``, no outputs, no
  message;
- ``PatternError`` → ``error`` with the error text as a runtime message;
- otherwise → ``ok`` with whatever outputs the solver produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Literal, Sequence

from ..config import get_settings
from .data_access import DataAccess, MissingInputError, PatternError, SolveResult, SolveStatus
from .fabrication import cnc_effective_offset, fabricate, laser_effective_offset
from .kernel import GeometryKernel
from .patterns import round_count, straight_line_pattern, zigzag_pattern

logger = logging.getLogger(__name__)

ParamKind = Literal["surface", "curve", "number"]
ParamAccess = Literal["item", "list"]

CATEGORY = "KERF-IN"


@dataclass(frozen=True)
class ParamSpec:
    name: str
    nickname: str
    description: str
    kind: ParamKind
    access: ParamAccess = "item"


Solver = Callable[[DataAccess, GeometryKernel], None]


@dataclass(frozen=True)
class ComponentDefinition:
    """Identity, metadata and solver of a registered component."""

    component_id: str
    name: str
    nickname: str
    description: str
    subcategory: str
    inputs: Sequence[ParamSpec]
    outputs: Sequence[ParamSpec]
    solver: Solver = field(compare=False)
    category: str = CATEGORY


def _report_dropped(da: DataAccess, dropped: List[int]) -> None:
    for idx in dropped:
        da.add_runtime_message(
            "warning",
            f"Pattern curve {idx} did not produce a closed offset loop and was skipped.",
        )


def _solve_fabrication(da: DataAccess, kernel: GeometryKernel, distance: float) -> None:
    tolerance = get_settings().tolerance
    surface = da.require(da.get_surface(0), 0)
    curves = da.require(da.get_curves(1), 1)
    result = fabricate(kernel, surface, curves, distance, tolerance)
    if result.dropped:
        logger.warning("Dropped %d pattern curve(s) without a closed loop: %s", len(result.dropped), result.dropped)
        _report_dropped(da, result.dropped)
    da.set_data_list(0, result.loops)
    da.set_data(1, result.remaining)


def solve_cnc(da: DataAccess, kernel: GeometryKernel) -> None:
    da.require(da.get_number(2), 2)  # material thickness
    drill_bit = da.require(da.get_number(3), 3)
    offset = da.require(da.get_number(4), 4)
    _solve_fabrication(da, kernel, cnc_effective_offset(drill_bit, offset))


def solve_laser(da: DataAccess, kernel: GeometryKernel) -> None:
    da.require(da.get_number(2), 2)  # material thickness
    offset = da.require(da.get_number(3), 3)
    _solve_fabrication(da, kernel, laser_effective_offset(offset))


def solve_straight_lines(da: DataAccess, kernel: GeometryKernel) -> None:
    surface = da.get_surface(0)
    if surface is None:
        raise PatternError("Input surface is null.")
    num_lines = da.require(da.get_number(1), 1)
    rect_width = da.require(da.get_number(2), 2)
    rect_length = da.require(da.get_number(3), 3)
    gap = da.require(da.get_number(4), 4)
    curves = straight_line_pattern(kernel, surface, round_count(num_lines), rect_width, rect_length, gap)
    da.set_data_list(0, curves)


def solve_zigzag(da: DataAccess, kernel: GeometryKernel) -> None:
    surface = da.require(da.get_surface(0), 0)
    u_div = round_count(da.require(da.get_number(1), 1))
    v_div = round_count(da.require(da.get_number(2), 2))
    da.set_data_list(0, zigzag_pattern(kernel, surface, u_div, v_div))


def solve_component(
    definition: ComponentDefinition,
    inputs: Sequence[Any],
    kernel: GeometryKernel,
) -> SolveResult:
    """Run ``definition``'s solver against positional ``inputs``."""
    da = DataAccess(inputs)
    try:
        definition.solver(da, kernel)
    except MissingInputError as exc:
        logger.debug("%s: skipped, %s", definition.nickname, exc)
        return SolveResult(status=SolveStatus.SKIPPED)
    except PatternError as exc:
        logger.info("%s: rejected input: %s", definition.nickname, exc)
        da.add_runtime_message("error", str(exc))
        return SolveResult(status=SolveStatus.ERROR, messages=list(da.messages))
    return SolveResult(status=SolveStatus.OK, outputs=dict(da.outputs), messages=list(da.messages))


_SURFACE_IN = ParamSpec("Surface", "srf", "Surface in which you want the pattern", "surface")
_THICKNESS_IN = ParamSpec("Material Thickness", "Thickness", "Thickness of the material", "number")
_OFFSET_IN = ParamSpec("Offset Distance", "Offset", "Offset of the distance you want", "number")
_PATTERNS_IN = ParamSpec("Pattern Curves", "Patterns", "Pattern curves", "curve", "list")
_FABRICATION_OUT = (
    ParamSpec("Offset Curves", "Curves", "Curves which we offset", "curve", "list"),
    ParamSpec("Split Surface", "SplitSrf", "Surface split with the curves", "surface"),
)
_PATTERN_OUT = (ParamSpec("PatternCurves", "Lines", "Pattern lines for kerfing", "curve", "list"),)

CNC = ComponentDefinition(
    component_id="efd5e6b3-e83d-4cfa-b9db-9b5b5342e43f",
    name="CNC FABRICATION",
    nickname="CNC",
    description="Components for CNC fabrication",
    subcategory="Fabrication",
    inputs=(
        _SURFACE_IN,
        _PATTERNS_IN,
        _THICKNESS_IN,
        ParamSpec("Drill bit size", "DrillBit", "Size of the drill bit", "number"),
        _OFFSET_IN,
    ),
    outputs=_FABRICATION_OUT,
    solver=solve_cnc,
)

LASER = ComponentDefinition(
    component_id="67930460-e5a9-44d0-8d9b-22edb1f142d7",
    name="LASER FABRICATION",
    nickname="LASER",
    description="Components for Laser fabrication",
    subcategory="Fabrication",
    inputs=(_SURFACE_IN, _PATTERNS_IN, _THICKNESS_IN, _OFFSET_IN),
    outputs=_FABRICATION_OUT,
    solver=solve_laser,
)

STRAIGHT_LINES = ComponentDefinition(
    component_id="14993506-b176-42b4-aacc-0575d28f43f1",
    name="Straight pattern lines",
    nickname="Straight Lines",
    description="Pattern of the kerfing is a straight line patterns",
    subcategory="Patterns",
    inputs=(
        _SURFACE_IN,
        ParamSpec("Number of lines", "No. of lines", "Number of lines of the pattern", "number"),
        ParamSpec("rectangle width", "rectWidth", "Width of the lines of the pattern", "number"),
        ParamSpec("rectangle length", "rectLength", "Length of the lines of the pattern", "number"),
        ParamSpec("Gap", "Gap", "Distance / Gap between the two lines", "number"),
    ),
    outputs=_PATTERN_OUT,
    solver=solve_straight_lines,
)

ZIGZAG = ComponentDefinition(
    component_id="81889f57-33e8-4692-a7e6-940bccc11373",
    name="ZIG ZAG PATTERN",
    nickname="ZIG ZAG",
    description="Zig Zag pattern lines for kerfing",
    subcategory="Patterns",
    inputs=(
        _SURFACE_IN,
        ParamSpec("U Divisions", "uDiv", "Number of divisions in U directions of the pattern", "number"),
        ParamSpec("V Divisions", "vDiv", "Number of divisions in V directions of the pattern", "number"),
    ),
    outputs=_PATTERN_OUT,
    solver=solve_zigzag,
)
