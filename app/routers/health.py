# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers, plus a
# configuration report that says which providers have credentials (never
# the credentials themselves).
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


class ConfigResponse(BaseModel):
    """Which integrations are configured. Booleans only."""
    environment: str
    supabase: bool
    supabase_jwt_secret: bool
    openai: bool
    cloudinary: bool
    cloudinary_upload_preset: bool
    stripe: bool
    stripe_webhook_secret: bool


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Returns whether the service is ready to accept requests.
    Checks database connectivity.
    """
    checks = ChecksResponse(database="unknown")

    try:
        SupabaseClient.ping()
        checks.database = "healthy"
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        checks.database = f"unhealthy: {str(e)[:50]}"

    return ReadinessResponse(
        status="ready" if checks.database == "healthy" else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(status="alive", timestamp=_now())


@router.get("/health/config", response_model=ConfigResponse)
async def config_check():
    """Report which providers are configured, as set/not set flags."""
    return ConfigResponse(
        environment=settings.ENVIRONMENT,
        supabase=bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_KEY),
        supabase_jwt_secret=bool(settings.SUPABASE_JWT_SECRET),
        openai=settings.openai_configured,
        cloudinary=settings.cloudinary_configured,
        cloudinary_upload_preset=bool(settings.CLOUDINARY_UPLOAD_PRESET),
        stripe=settings.stripe_configured,
        stripe_webhook_secret=bool(settings.STRIPE_WEBHOOK_SECRET),
    )
