"""
Health check endpoints for the subscription relay.

Provides liveness status for the hosting platform's load balancer.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.dependencies import get_app_settings
from config.constants import SERVICE_NAME, SERVICE_VERSION
from config.settings import Settings

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "status": "running",
        "message": f"{SERVICE_NAME} backend",
        "version": SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """
    Liveness check.

    The relay is stateless, so there is no database to probe; the response
    only reports whether PayPal credentials are configured.
    """
    return {
        "status": "healthy",
        "paypal_configured": settings.paypal_configured,
        "paypal_mode": "live" if settings.is_production else "sandbox"
    }
