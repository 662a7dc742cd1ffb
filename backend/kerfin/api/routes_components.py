"""
API routes for listing and solving components.

The endpoints in this router expose the component registry over HTTP:
clients discover components and their parameter declarations, POST
positional inputs to solve one, or export the curves a solve produces
as CSV for downstream CAM tooling.

Components are addressed by their stable identifier or, for
convenience, by their nickname (``cnc``, ``laser``, ``straight lines``,
``zig zag``).
"""

from __future__ import annotations

import csv
import io
import logging
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..services.components import ComponentDefinition, ParamSpec, solve_component
from ..services.data_access import SolveResult, SolveStatus
from ..services.kernel import GeometryKernel
from ..services.planar_kernel import ShapelyKernel
from ..services.registry import LIBRARY_INFO, get_component, list_components
from ..services.shapes import Curve
from .models import (
    ComponentInfo,
    LibraryInfo,
    ParamInfo,
    RuntimeMessageModel,
    SolveRequest,
    SolveResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_kernel() -> GeometryKernel:
    """Kernel dependency; tests override it with a fake."""
    return ShapelyKernel()


def _param_info(spec: ParamSpec) -> ParamInfo:
    return ParamInfo(
        name=spec.name,
        nickname=spec.nickname,
        description=spec.description,
        kind=spec.kind,
        access=spec.access,
    )


def _component_info(component: ComponentDefinition) -> ComponentInfo:
    return ComponentInfo(
        componentId=component.component_id,
        name=component.name,
        nickname=component.nickname,
        description=component.description,
        category=component.category,
        subcategory=component.subcategory,
        inputs=[_param_info(p) for p in component.inputs],
        outputs=[_param_info(p) for p in component.outputs],
    )


def _lookup(key: str) -> ComponentDefinition:
    component = get_component(key)
    if component is None:
        raise HTTPException(status_code=404, detail=f"Component '{key}' not found")
    return component


def _serialise(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [_serialise(v) for v in value]
    to_dict = getattr(value, "to_dict", None)
    if to_dict is not None:
        return to_dict()
    return value


def _run(component: ComponentDefinition, body: SolveRequest, kernel: GeometryKernel) -> SolveResult:
    try:
        return solve_component(component, body.inputs, kernel)
    except Exception as exc:
        logger.exception("solve failed for component %s: %s", component.nickname, exc)
        raise HTTPException(status_code=500, detail=f"Failed to solve component: {exc}")


@router.get("/library", response_model=LibraryInfo)
async def get_library() -> LibraryInfo:
    return LibraryInfo(**LIBRARY_INFO, componentCount=len(list_components()))


@router.get("/components", response_model=List[ComponentInfo])
async def get_components() -> List[ComponentInfo]:
    return [_component_info(c) for c in list_components()]


@router.get("/components/{key}", response_model=ComponentInfo)
async def get_component_info(key: str) -> ComponentInfo:
    return _component_info(_lookup(key))


@router.post("/components/{key}/solve", response_model=SolveResponse)
async def solve(
    key: str,
    body: SolveRequest,
    kernel: GeometryKernel = Depends(get_kernel),
) -> SolveResponse:
    """Solve a component for the given positional inputs.

    A missing or unconvertible required input is not an HTTP error: the
    response carries ``status="skipped"`` and no outputs.  Rejected
    parameters yield ``status="error"`` together with the error
    messages.
    """
    component = _lookup(key)
    result = _run(component, body, kernel)
    outputs: List[Any] = []
    if result.status == SolveStatus.OK:
        outputs = [_serialise(result.outputs.get(i)) for i in range(len(component.outputs))]
    logger.debug(
        "solve %s: status=%s messages=%d",
        component.nickname,
        result.status.value,
        len(result.messages),
    )
    return SolveResponse(
        componentId=component.component_id,
        status=result.status.value,
        outputs=outputs,
        messages=[RuntimeMessageModel(level=m.level, text=m.text) for m in result.messages],
    )


@router.post("/components/{key}/export")
async def export_curves(
    key: str,
    body: SolveRequest,
    kernel: GeometryKernel = Depends(get_kernel),
) -> Response:
    """Solve a component and export its output curves as CSV.

    Each row holds the curve number (counted across all curve outputs),
    the point index within the curve and the point coordinates.
    """
    component = _lookup(key)
    result = _run(component, body, kernel)
    if result.status != SolveStatus.OK:
        detail: Dict[str, Any] = {
            "status": result.status.value,
            "messages": [{"level": m.level, "text": m.text} for m in result.messages],
        }
        raise HTTPException(status_code=422, detail=detail)
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["curve", "index", "x", "y", "z"])
    curve_no = 0
    for i, spec in enumerate(component.outputs):
        if spec.kind != "curve":
            continue
        value = result.outputs.get(i)
        curves = value if isinstance(value, list) else [value]
        for curve in curves:
            if not isinstance(curve, Curve):
                continue
            for idx, (x, y, z) in enumerate(curve.points):
                writer.writerow([curve_no, idx, x, y, z])
            curve_no += 1
    return Response(content=output.getvalue(), media_type="text/csv")
