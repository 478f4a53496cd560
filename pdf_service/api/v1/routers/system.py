"""
System Router - Health and status endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ....config import Settings
from ....deps import get_app_settings, get_job_queue
from ....models import HealthResponse
from ....services.job_queue import JobQueue

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    job_queue: JobQueue = Depends(get_job_queue),
) -> HealthResponse:
    """
    Check service health.

    Does not render anything; reports the render queue state.
    """
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        queue=job_queue.stats(),
    )


@router.get("/")
async def root(settings: Settings = Depends(get_app_settings)) -> dict:
    """Root endpoint."""
    return {
        "service": settings.service_name,
        "version": settings.api_version,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "pdf": "/pdf",
            "docs": "/docs",
            "openapi": "/openapi.json",
        },
    }
