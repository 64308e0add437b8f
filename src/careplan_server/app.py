"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the category registry and builds the
    wizards and care plan service once
  - CORS middleware
  - Global exception handlers (CarePlanError codes → 400/404/409/500)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``careplan-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from careplan_db.engine import dispose_engine, get_engine
from careplan_engine.care_plan import CarePlanService
from careplan_engine.errors import CarePlanError
from careplan_engine.registry import CategoryRegistry
from careplan_engine.wizard import build_wizards

from careplan_server.config import ServerSettings, load_settings
from careplan_server.errors import (
    care_plan_error_handler,
    generic_error_handler,
    key_error_handler,
    request_validation_error_handler,
)
from careplan_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan — runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Load ``categories.yaml`` into a ``CategoryRegistry``
      2. Build one wizard per wizard category and the ``CarePlanService``
      3. Stash them on ``app.state`` for dependency injection

    Shutdown:
      1. Dispose the database engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    # --- Load category tables ---
    registry = CategoryRegistry(settings.registry_path)
    registry.load()

    # --- Build services ---
    app.state.registry = registry
    app.state.wizards = build_wizards(registry)
    app.state.care_plan_service = CarePlanService(registry)
    logger.info("Wizards ready for: %s", ", ".join(c.value for c in app.state.wizards))

    yield

    # --- Shutdown ---
    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Care Plan API Server",
        description="REST API for the delirium-risk care plan assessments",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings so the lifespan handler can read them
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(CarePlanError, care_plan_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Readiness probe (outside /api/v1, no identity header) ---
    @app.get("/health")
    async def health():
        """200 when the database answers, 503 otherwise."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Health check failed: %s", exc)
            return JSONResponse(
                status_code=503, content={"status": "error", "detail": "database unavailable"},
            )
        return {"status": "ok"}

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn careplan_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``careplan-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "careplan_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
