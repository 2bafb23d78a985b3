"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import create_api_router
from .config import settings
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(level="DEBUG" if settings.development else None)
    app.state.started_at = datetime.utcnow()
    logger.info(f"Extraction service started (source domain: {settings.episode_source_domain})")
    yield
    logger.info("Extraction service stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pitch Fund Extraction API",
        description="Episode metadata and investment memo extraction",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(), prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        started_at = getattr(app.state, 'started_at', None)
        return {
            "status": "healthy",
            "started_at": started_at.isoformat() if started_at else None,
        }

    return app


app = create_app()
