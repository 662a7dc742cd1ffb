"""
Runtime configuration for the KERF-IN service.

Settings are read from environment variables once and cached, so the
rest of the code base can call :func:`get_settings` freely.  Every
value has a sensible default; the service starts without any
configuration at all.

Recognised variables:

- ``KERFIN_TOLERANCE`` – geometric tolerance passed to the kernel for
  offsetting, joining and splitting (default ``0.01`` model units).
- ``KERFIN_BOUNDARY_SAMPLES`` – number of samples per surface edge used
  when a surface is converted to a planar region (default ``16``).
- ``KERFIN_MAX_PATTERN_CURVES`` – upper bound on the curves a pattern
  generator may produce in one solve (default ``100000``).
- ``KERFIN_HOST`` / ``KERFIN_PORT`` – bind address for ``run.py``.
- ``KERFIN_LOG_LEVEL`` – logging level name (default ``INFO``).
- ``KERFIN_CORS_ORIGINS`` – comma separated list of allowed origins
  (default ``*``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List


@dataclass(frozen=True)
class Settings:
    """Immutable bundle of service settings."""

    tolerance: float = 0.01
    boundary_samples: int = 16
    max_pattern_curves: int = 100000
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build a :class:`Settings` instance from the current environment."""
    origins_raw = os.getenv("KERFIN_CORS_ORIGINS", "*")
    origins = [o.strip() for o in origins_raw.split(",") if o.strip()] or ["*"]
    tolerance = _env_float("KERFIN_TOLERANCE", 0.01)
    if tolerance <= 0.0:
        raise ValueError("KERFIN_TOLERANCE must be positive")
    samples = _env_int("KERFIN_BOUNDARY_SAMPLES", 16)
    if samples < 2:
        raise ValueError("KERFIN_BOUNDARY_SAMPLES must be at least 2")
    max_curves = _env_int("KERFIN_MAX_PATTERN_CURVES", 100000)
    if max_curves < 1:
        raise ValueError("KERFIN_MAX_PATTERN_CURVES must be at least 1")
    return Settings(
        tolerance=tolerance,
        boundary_samples=samples,
        max_pattern_curves=max_curves,
        host=os.getenv("KERFIN_HOST", "0.0.0.0"),
        port=_env_int("KERFIN_PORT", 8000),
        log_level=os.getenv("KERFIN_LOG_LEVEL", "INFO").upper(),
        cors_origins=origins,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process wide settings, loading them on first use."""
    return load_settings()
