"""Health & Readiness Checks — liveness and readiness for container orchestration.

Invariants:
    - GET /api/v1/health/ returns 200 whenever the process is up (liveness)
    - GET /api/v1/health/ready returns 503 until the database answers (readiness)
    - Readiness also reports how many project locks are currently held or awaited
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.infrastructure import database
from app.infrastructure.project_locks import ProjectLockRegistry, get_project_locks

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "milestone-fund-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness_check(
    locks: ProjectLockRegistry = Depends(get_project_locks),
):
    """Readiness check: database round trip plus lock registry size."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "active_project_locks": len(locks),
    }
