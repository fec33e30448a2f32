"""
PDF RAG Server Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Explicit construction of the in-memory document store
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .config import settings
from .core.errors import register_exception_handlers
from .documents.store import DocumentStore

from .api import (
    document_routes,
    search_routes,
    health_routes,
)


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger("pdfrag.app")


# ---------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Fail-fast configuration validation on startup; drop documents on shutdown.
    """
    logger.info("Starting pdf-rag-server")

    if not settings.jwt_client_secret.get_secret_value():
        raise RuntimeError("jwt_client_secret is not configured.")

    if not settings.openai_api_key.get_secret_value():
        logger.warning("openai_api_key is not configured; uploads and searches will fail")

    logger.info("Configuration validated successfully")

    yield

    logger.info(
        "Shutting down pdf-rag-server (%d documents discarded)",
        len(app.state.document_store),
    )
    app.state.document_store.clear_all()


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app(document_store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Parameters
    ----------
    document_store : Optional[DocumentStore]
        Store to serve from. A new empty store is created when omitted, so
        each application instance (and each test) gets isolated state.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="pdf-rag-server",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.document_store = document_store if document_store is not None else DocumentStore()

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    register_exception_handlers(app)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(document_routes.router)
    app.include_router(search_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
