# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.dependencies import ArticleStoreDep, DatabaseDep, SettingsDep
from core.models.envelope import Envelope

router = APIRouter()


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
    """Individual dependency checks."""
    database: str
    article_count: int


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=Envelope[HealthResponse])
def health_check(settings: SettingsDep):
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return Envelope(
        code=200,
        message="ok",
        data=HealthResponse(
            status="healthy",
            timestamp=_now(),
            environment=settings.app.env,
            version=settings.app.version,
        ),
    )


@router.get("/health/ready", response_model=Envelope[ReadinessResponse])
def readiness_check(store: ArticleStoreDep, database: DatabaseDep):
    """
    Readiness check endpoint.

    Pings MySQL when it is enabled; responds 503 if the ping fails.
    """
    if database is None:
        db_status = "disabled"
    else:
        try:
            database.ping()
            db_status = "healthy"
        except Exception as e:
            db_status = f"unhealthy: {str(e)[:50]}"

    ready = db_status in ("healthy", "disabled")
    body = Envelope(
        code=200 if ready else 503,
        message="ready" if ready else "degraded",
        data=ReadinessResponse(
            status="ready" if ready else "degraded",
            checks=ChecksResponse(database=db_status, article_count=len(store)),
            timestamp=_now(),
        ),
    )
    if ready:
        return body
    return JSONResponse(status_code=503, content=body.model_dump())


@router.get("/health/live", response_model=Envelope[LivenessResponse])
def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return Envelope(
        code=200,
        message="alive",
        data=LivenessResponse(status="alive", timestamp=_now()),
    )
