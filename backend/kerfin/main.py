"""
Main application module for the KERF-IN service.

This file sets up the FastAPI application, configures CORS so browser
based editors can call the API directly, and exposes a simple health
check endpoint.  The component router is included under the ``/api``
namespace.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes_components import router as components_router
from .config import get_settings


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    settings = get_settings()
    app = FastAPI(title="KERF-IN", description="Kerfing patterns and fabrication curves")

    # Allowed origins come from KERFIN_CORS_ORIGINS and default to all.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint for monitoring and deployment probes.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(components_router, prefix="/api", tags=["components"])

    return app


# Create the application instance.  Uvicorn will import this when
# running `uvicorn kerfin.main:app` from within the backend directory.
app = create_app()
