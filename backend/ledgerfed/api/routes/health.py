"""Health & Readiness Probes — liveness and per-tier readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the hot database is unreachable
    - A cold-only outage reports "degraded" with 200: queries still succeed

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Cold outage does not fail readiness because the engine degrades instead of erroring
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "ledgerfed-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — checks both tier databases."""
    databases = getattr(request.app.state, "databases", None)
    hot_ok = await databases.hot.health_check() if databases else False
    cold_ok = await databases.cold.health_check() if databases else False
    checks = {
        "hot": "healthy" if hot_ok else "unavailable",
        "cold": "healthy" if cold_ok else "unavailable",
    }
    if not hot_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "hot_database_unavailable",
                "checks": checks,
            },
        )
    if not cold_ok:
        logger.warning("Cold tier unavailable; serving degraded results")
        return {"status": "degraded", "checks": checks}
    return {"status": "ready", "checks": checks}
