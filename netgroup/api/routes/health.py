"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - Both are PUBLIC in the route policy table

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer
    - Probe bodies are not wrapped in the success envelope: orchestrators read them raw
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from netgroup.api.guards import enforce_route_policy
from netgroup.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/health", tags=["health"],
    dependencies=[Depends(enforce_route_policy)],
)


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "netgroup-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
