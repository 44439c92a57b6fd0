"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
import platform

from fastapi import APIRouter, Depends
from sqlalchemy import text

from storefront import __version__
from storefront.domain.value_objects import utcnow
from storefront_api.dependencies import get_db_session_factory

router = APIRouter()


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "service": "infinitytech-storefront",
        "version": __version__,
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(session_factory=Depends(get_db_session_factory)):
    """Ready when the database answers a trivial query."""
    async with session_factory() as session:
        await session.execute(text("SELECT 1"))
    return {
        "status": "ready",
        "timestamp": utcnow().isoformat(),
        "checks": {"api": "ok", "database": "ok"},
    }
