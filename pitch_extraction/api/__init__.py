"""API routers package."""

from fastapi import APIRouter

from .extraction_router import router as extraction_router


def create_api_router() -> APIRouter:
    """Create the main API router with all sub-routers."""
    router = APIRouter()
    router.include_router(extraction_router, tags=["extraction"])
    return router
