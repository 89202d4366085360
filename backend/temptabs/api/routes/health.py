"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the container is missing or the SQL store
      is unreachable (readiness); the memory store is always ready
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from temptabs.infrastructure.kv_store import SqlItemStore
from temptabs.services.container import get_container

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "temptabs-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe: includes store connectivity."""
    try:
        container = get_container()
    except RuntimeError:
        return _not_ready("service_uninitialized")

    manager = container.store.manager if isinstance(container.store, SqlItemStore) else None
    if manager is not None and not await manager.health_check():
        return _not_ready("database_unavailable")

    return {
        "status": "ready",
        "checks": {
            "store": "sql" if manager is not None else "memory",
            "database": "healthy" if manager is not None else "n/a",
        },
    }


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
