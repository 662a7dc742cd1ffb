"""
Pydantic data models for the KERF-IN component API.

Geometry travels as plain JSON:

- surfaces: ``{"controlPoints": [[[x, y, z], ...], ...], "uDomain": [a, b], "vDomain": [a, b]}``
- curves: ``{"points": [[x, y, z], ...]}`` (responses add ``closed``)
- split regions: ``{"exterior": [...], "holes": [[...]], "z": z, "area": a}``

Solve requests carry the component inputs positionally, in the order
the component declares them.  Values are deliberately left untyped at
this layer: conversion happens in the data access object so that an
unconvertible value behaves exactly like a missing one.
"""

from __future__ import annotations

from typing import Any, List, Literal

from pydantic import BaseModel, Field


class ParamInfo(BaseModel):
    """Declaration of a single component input or output."""

    name: str
    nickname: str
    description: str
    kind: Literal["surface", "curve", "number"]
    access: Literal["item", "list"]


class ComponentInfo(BaseModel):
    """Identity and display metadata of a registered component."""

    componentId: str = Field(..., description="Stable identifier of the component")
    name: str
    nickname: str
    description: str
    category: str
    subcategory: str
    inputs: List[ParamInfo] = Field(default_factory=list)
    outputs: List[ParamInfo] = Field(default_factory=list)


class LibraryInfo(BaseModel):
    name: str
    id: str
    description: str
    version: str
    componentCount: int


class SolveRequest(BaseModel):
    """Positional inputs for one component invocation."""

    inputs: List[Any] = Field(
        default_factory=list,
        description="Input values ordered as declared by the component; null marks a missing value",
    )


class RuntimeMessageModel(BaseModel):
    level: Literal["error", "warning", "remark"]
    text: str


class SolveResponse(BaseModel):
    """Result of a component invocation.

    ``status`` is ``ok`` when outputs were produced, ``skipped`` when a
    required input was missing (no outputs, no messages) and ``error``
    when the inputs were rejected (no outputs, at least one error
    message).
    """

    componentId: str
    status: Literal["ok", "skipped", "error"]
    outputs: List[Any] = Field(
        default_factory=list,
        description="Output values ordered as declared by the component; null for unset outputs",
    )
    messages: List[RuntimeMessageModel] = Field(default_factory=list)
