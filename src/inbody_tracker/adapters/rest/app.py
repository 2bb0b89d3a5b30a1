"""
FastAPI application - REST adapter for the InBody tracker.

Usage:
    python run_api.py

Or directly:
    uvicorn inbody_tracker.adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inbody_tracker import __version__
from inbody_tracker.adapters.rest.dependencies import set_factory
from inbody_tracker.adapters.rest.routers import attendance, dashboard, inbody
from inbody_tracker.domain.exceptions import StorageUnavailable, ValidationError
from inbody_tracker.factory import ServiceFactory
from inbody_tracker.infrastructure.config import Settings

logger = logging.getLogger(__name__)

_project_root = Path(__file__).resolve().parents[4]


def create_app(factory: Optional[ServiceFactory] = None) -> FastAPI:
    """Build the API. A pre-built factory may be passed in (tests)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize ServiceFactory on startup."""
        active = factory
        if active is None:
            config = Settings.from_env(project_root=_project_root)
            logging.basicConfig(level=config.log_level)
            active = ServiceFactory(config)
        await active.initialize()
        set_factory(active)
        yield
        # aiosqlite connections are per-operation
        set_factory(None)

    app = FastAPI(
        title="InBody Tracker",
        version=__version__,
        description="Body-composition tracking API: InBody report OCR, insights and trends.",
        lifespan=lifespan,
    )

    # CORS - permissive for development; tighten allowed_origins in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": {"field_errors": exc.field_errors}},
        )

    @app.exception_handler(StorageUnavailable)
    async def _storage_unavailable(request: Request, exc: StorageUnavailable):
        logger.warning("Storage unavailable for %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Storage is temporarily unavailable. Please retry."},
        )

    # Register routers
    app.include_router(inbody.router)
    app.include_router(attendance.router)
    app.include_router(dashboard.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
