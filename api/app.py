"""
FastAPI application factory.

Creates and configures the FastAPI app with:
- Lifespan startup/shutdown for component initialization
- Job submission and status routes
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from api.dependencies import initialize_components, reset_components
from api.routes.jobs import router as jobs_router
from core.container import Components

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(components: Optional[Components] = None) -> FastAPI:
    """Create and return the configured FastAPI application.

    Components are built from the settings at startup unless given.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting up - initializing job components...")
        initialize_components(components)
        logger.info("Startup complete. API is ready.")
        yield
        reset_components()
        logger.info("Shutting down.")

    app = FastAPI(
        title="PDF Ingestion API",
        description=(
            "Submit PDF ingestion jobs to the pdf_transform queue and follow "
            "their progress."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------
    app.include_router(jobs_router)

    # ------------------------------------------------------------------
    # Health check (root)
    # ------------------------------------------------------------------
    @app.get("/health", tags=["health"], summary="Health check")
    def health() -> dict:
        return {"status": "ok", "service": "pdf-ingestion"}

    return app
