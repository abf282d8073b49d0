"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /healthz always returns 200 if process is up (liveness)
    - GET /healthz/ready returns 503 only if a configured database is unreachable

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - No database configured is "ready": auditing is optional, the MCP tools still work
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from xcloudflow.config import get_settings
import xcloudflow.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/healthz", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.server_name,
        "version": settings.server_version,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity when configured."""
    manager = database.db_manager
    if manager is None:
        return {"status": "ready", "checks": {"database": "not_configured"}}
    if not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
