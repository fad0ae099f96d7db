"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import settings
from ...core.database import get_db_session
from ...core.logging import get_logger
from ...models.schemas import HealthResponse, ReadinessResponse

logger = get_logger(__name__)
router = APIRouter()


@router.get("/live", response_model=HealthResponse)
async def liveness_probe():
    """Liveness probe endpoint."""
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=settings.service_version,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_probe(session: AsyncSession = Depends(get_db_session)):
    """Readiness probe endpoint."""

    checks = {}
    overall_status = "healthy"

    try:
        await session.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        checks["database"] = "unhealthy"
        overall_status = "unhealthy"
        logger.error("Database check failed", error_type=type(e).__name__)

    if overall_status == "unhealthy" and settings.environment == "production":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready",
        )

    return ReadinessResponse(
        status=overall_status,
        service=settings.service_name,
        version=settings.service_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )
