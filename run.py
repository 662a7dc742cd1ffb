"""
Entry point for the KERF-IN service.

Running this script with ``python run.py`` starts the FastAPI server
that exposes the kerfing and fabrication components.  The application
defined in ``backend/kerfin/main.py`` is imported after adjusting the
Python path to include the ``backend`` directory.
"""

from __future__ import annotations

import sys
from pathlib import Path

import logging
import uvicorn


def main() -> None:
    """Run the Uvicorn server hosting the component API."""
    # Make ``kerfin`` importable when running from a source checkout.
    backend_dir = Path(__file__).resolve().parent / "backend"
    if str(backend_dir) not in sys.path:
        sys.path.append(str(backend_dir))

    from kerfin.config import get_settings  # type: ignore

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Import the FastAPI application only after logging is configured.
    from kerfin.main import app  # type: ignore

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
