"""
Host data access for a single component invocation.

A :class:`DataAccess` wraps the positional inputs supplied by the
caller, converts them on demand into the service's value types, and
collects the outputs and runtime messages a component produces.  Input
values may already be :class:`~kerfin.services.shapes.Surface` /
:class:`~kerfin.services.shapes.Curve` instances (direct Python use) or
plain JSON‑like structures as received by the HTTP layer.

Getters never raise: an absent or unconvertible value is reported as
``None``.  Components that cannot proceed without a value call
:meth:`DataAccess.require`, which raises :class:`MissingInputError`;
the solve driver turns that into a ``skipped`` result carrying no
outputs and no diagnostic.  Validation failures are raised as
:class:`PatternError` and turn into an ``error`` result with a message.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, TypeVar

from .shapes import Curve, Surface

logger = logging.getLogger(__name__)

MessageLevel = Literal["error", "warning", "remark"]

T = TypeVar("T")


class MissingInputError(Exception):
    """A required input was absent or could not be converted."""

    def __init__(self, index: Optional[int] = None) -> None:
        self.index = index
        super().__init__(f"Missing required input {index}" if index is not None else "Missing required input")


class PatternError(Exception):
    """Input parameters describe a pattern that cannot be produced."""


class SolveStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class RuntimeMessage:
    level: MessageLevel
    text: str


@dataclass
class SolveResult:
    """Outcome of one component invocation.

    ``outputs`` maps output indices to values; it is empty unless the
    status is :attr:`SolveStatus.OK`.
    """

    status: SolveStatus
    outputs: Dict[int, Any] = field(default_factory=dict)
    messages: List[RuntimeMessage] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [m.text for m in self.messages if m.level == "error"]

    @property
    def warnings(self) -> List[str]:
        return [m.text for m in self.messages if m.level == "warning"]


def _to_surface(value: Any) -> Surface:
    if isinstance(value, Surface):
        return value
    if isinstance(value, dict):
        return Surface.from_grid(
            value["controlPoints"],
            value.get("uDomain", (0.0, 1.0)),
            value.get("vDomain", (0.0, 1.0)),
        )
    raise TypeError(f"Cannot convert {type(value).__name__} to a surface")


def _to_curve(value: Any) -> Curve:
    if isinstance(value, Curve):
        return value
    if isinstance(value, dict):
        return Curve.from_points(value["points"])
    if isinstance(value, (list, tuple)):
        return Curve.from_points(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a curve")


class DataAccess:
    """Typed access to the inputs and outputs of one invocation."""

    def __init__(self, inputs: Sequence[Any]) -> None:
        self._inputs = list(inputs)
        self.outputs: Dict[int, Any] = {}
        self.messages: List[RuntimeMessage] = []

    def _raw(self, index: int) -> Any:
        if 0 <= index < len(self._inputs):
            return self._inputs[index]
        return None

    def get_surface(self, index: int) -> Optional[Surface]:
        raw = self._raw(index)
        if raw is None:
            return None
        try:
            return _to_surface(raw)
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Input %d is not a usable surface: %s", index, exc)
            return None

    def get_curves(self, index: int) -> Optional[List[Optional[Curve]]]:
        """Return the curve list at ``index``.

        Individual items that cannot be converted are returned as
        ``None`` so that callers can skip them.  An absent or empty list
        yields ``None``.
        """
        raw = self._raw(index)
        if raw is None:
            return None
        if isinstance(raw, (Curve, dict)):
            raw = [raw]
        if not isinstance(raw, (list, tuple)) or not raw:
            return None
        curves: List[Optional[Curve]] = []
        for pos, item in enumerate(raw):
            if item is None:
                curves.append(None)
                continue
            try:
                curves.append(_to_curve(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.debug("Input %d item %d is not a usable curve: %s", index, pos, exc)
                curves.append(None)
        return curves

    def get_number(self, index: int) -> Optional[float]:
        raw = self._raw(index)
        if raw is None or isinstance(raw, bool):
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.debug("Input %d is not a number: %r", index, raw)
            return None
        if not math.isfinite(value):
            return None
        return value

    def require(self, value: Optional[T], index: Optional[int] = None) -> T:
        if value is None:
            raise MissingInputError(index)
        return value

    def set_data(self, index: int, value: Any) -> None:
        self.outputs[index] = value

    def set_data_list(self, index: int, values: Sequence[Any]) -> None:
        self.outputs[index] = list(values)

    def add_runtime_message(self, level: MessageLevel, text: str) -> None:
        self.messages.append(RuntimeMessage(level=level, text=text))
