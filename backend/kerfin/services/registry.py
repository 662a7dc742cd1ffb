"""
Registry of the components exposed by the service.

The registry is built once at import time and never mutated.
Components are looked up either by their stable identifier (a GUID
string, compared case‑insensitively) or by their nickname.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .components import CNC, LASER, STRAIGHT_LINES, ZIGZAG, ComponentDefinition

LIBRARY_VERSION = "0.1.0"

LIBRARY_INFO: Dict[str, str] = {
    "name": "KERF-IN",
    "id": "c078431a-7330-4201-befd-72e6232973f2",
    "description": "Kerfing patterns and CNC/laser fabrication curves",
    "version": LIBRARY_VERSION,
}

_COMPONENTS: Dict[str, ComponentDefinition] = {
    c.component_id: c for c in (CNC, LASER, STRAIGHT_LINES, ZIGZAG)
}


def list_components() -> List[ComponentDefinition]:
    return list(_COMPONENTS.values())


def get_component(key: str) -> Optional[ComponentDefinition]:
    """Find a component by identifier or nickname; ``None`` if unknown."""
    norm = (key or "").strip().lower()
    if norm in _COMPONENTS:
        return _COMPONENTS[norm]
    for component in _COMPONENTS.values():
        if component.nickname.lower() == norm:
            return component
    return None
