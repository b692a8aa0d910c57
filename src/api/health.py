"""
Health Check API
System health and readiness endpoints
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..analysis import CHEMISTRY_PROFILES
from ..config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    app_name: str
    app_env: str
    version: str
    chemistries: int


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check application health status.

    Returns application info and the number of loaded chemistry profiles.
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy" if CHEMISTRY_PROFILES else "degraded",
        app_name=settings.app_name,
        app_env=settings.app_env,
        version="0.1.0",
        chemistries=len(CHEMISTRY_PROFILES)
    )


@router.get("/ready")
async def readiness_check():
    """
    Readiness probe.
    Returns 200 once the chemistry table is loaded.
    """
    if not CHEMISTRY_PROFILES:
        raise HTTPException(status_code=503, detail="Chemistry profiles not loaded")

    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """
    Liveness probe.
    Returns 200 if application is alive.
    """
    return {"alive": True}
