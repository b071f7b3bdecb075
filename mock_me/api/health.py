"""
Health check endpoints.
"""
from fastapi import APIRouter
from pydantic import BaseModel

from mock_me.core.database import mongodb_client
from mock_me.core.storage import audio_store

router = APIRouter()

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    mongodb: bool
    storage: bool
    version: str = VERSION


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check the health of the database and audio storage.
    """
    mongodb_ok = await mongodb_client.health_check()
    storage_ok = await audio_store.health_check()

    overall_status = "healthy" if (mongodb_ok and storage_ok) else "degraded"

    return HealthResponse(
        status=overall_status,
        mongodb=mongodb_ok,
        storage=storage_ok,
    )


@router.get("/api/v1")
async def api_info():
    """API info."""
    return {
        "name": "Mock-Me API",
        "version": VERSION,
        "docs": "/docs",
    }
