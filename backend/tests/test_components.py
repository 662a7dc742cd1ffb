"""
Tests for component solving and the solve result contract.

``solve_component`` must distinguish three outcomes: outputs produced
(``ok``), a required input missing (``skipped`` with no messages) and
rejected parameters (``error`` with a message).
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from kerfin.services.components import CNC, LASER, STRAIGHT_LINES, ZIGZAG, solve_component
from kerfin.services.data_access import DataAccess, SolveStatus
from kerfin.services.registry import LIBRARY_INFO, get_component, list_components
from kerfin.services.shapes import Curve, Surface

from fakes import FakeKernel

SQUARE = Surface.rectangle(10.0, 10.0).to_dict()


def test_registry_lookup() -> None:
    assert len(list_components()) == 4
    assert get_component("EFD5E6B3-E83D-4CFA-B9DB-9B5B5342E43F") is CNC
    assert get_component("laser") is LASER
    assert get_component("zig zag") is ZIGZAG
    assert get_component("nope") is None
    assert LIBRARY_INFO["name"] == "KERF-IN"


def test_data_access_conversion() -> None:
    da = DataAccess([SQUARE, [{"points": [[0, 0], [1, 0]]}, "junk"], "2.5", True, float("nan")])
    assert da.get_surface(0) is not None
    assert da.get_surface(1) is None
    curves = da.get_curves(1)
    assert curves is not None and isinstance(curves[0], Curve) and curves[1] is None
    assert da.get_number(2) == 2.5
    assert da.get_number(3) is None
    assert da.get_number(4) is None
    assert da.get_number(99) is None


def test_missing_input_skips_without_message() -> None:
    kernel = FakeKernel()
    for component, inputs in [
        (CNC, [SQUARE, [[[0, 1], [4, 1]]], 3.0, None, 0.5]),
        (LASER, [None, [[[0, 1], [4, 1]]], 3.0, 0.5]),
        (ZIGZAG, [SQUARE, 4]),
        (STRAIGHT_LINES, [SQUARE, 2, 1.0, None, 3.0]),
    ]:
        result = solve_component(component, inputs, kernel)
        assert result.status == SolveStatus.SKIPPED
        assert result.outputs == {}
        assert result.messages == []


def test_straight_lines_reports_validation_errors() -> None:
    kernel = FakeKernel()
    result = solve_component(STRAIGHT_LINES, [SQUARE, 2, 3.0, 2.0, 3.0], kernel)
    assert result.status == SolveStatus.ERROR
    assert result.outputs == {}
    assert result.errors == ["rectWidth must be smaller than gap."]

    no_surface = solve_component(STRAIGHT_LINES, [None, 2, 1.0, 2.0, 3.0], kernel)
    assert no_surface.status == SolveStatus.ERROR
    assert no_surface.errors == ["Input surface is null."]


def test_straight_lines_outputs_rectangles() -> None:
    result = solve_component(STRAIGHT_LINES, [SQUARE, 2.0, 1.0, 2.0, 3.0], FakeKernel())
    assert result.status == SolveStatus.OK
    assert len(result.outputs[0]) == 6


def test_cnc_uses_drill_radius_and_reports_dropped_curves() -> None:
    bad = Curve(((0.0, 8.0, 0.0), (4.0, 8.0, 0.0)))
    kernel = FakeKernel(offset_fails={bad})
    inputs = [SQUARE, [[[0, 2], [4, 2]], bad], 3.0, 1.0, 0.25]
    result = solve_component(CNC, inputs, kernel)
    assert result.status == SolveStatus.OK
    loops = result.outputs[0]
    assert len(loops) == 1
    # Effective offset 1.0 / 2 + 0.25 = 0.75 on each side.
    assert sorted({p[1] for p in loops[0].points}) == [1.25, 2.75]
    assert result.outputs[1] is not None
    assert len(result.warnings) == 1 and "1" in result.warnings[0]


def test_laser_uses_offset_directly() -> None:
    result = solve_component(LASER, [SQUARE, [[[0, 2], [4, 2]]], 3.0, 0.25], FakeKernel())
    assert result.status == SolveStatus.OK
    assert sorted({p[1] for p in result.outputs[0][0].points}) == [1.75, 2.25]
    assert result.messages == []


def test_zigzag_rounds_division_counts() -> None:
    result = solve_component(ZIGZAG, [SQUARE, 3.4, 2.6], FakeKernel())
    assert result.status == SolveStatus.OK
    # 3 × 3 points → quads (0,0) and (1,1) are filled.
    assert len(result.outputs[0]) == 8


def test_oversized_patterns_are_reported_as_errors() -> None:
    result = solve_component(ZIGZAG, [SQUARE, 1e6, 1e6], FakeKernel())
    assert result.status == SolveStatus.ERROR
    assert result.outputs == {}
    assert "more than 100000 curves" in result.errors[0]
