"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.catalog.api.http.deps import get_app_config, get_database_service
from src.catalog.core.services import DbSessionService
from src.catalog.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe. Does not check dependencies."""
    return {"status": "healthy", "service": "catalog"}


@router.get("/ready", response_model=None)
async def readiness(
    database_service: DbSessionService = Depends(get_database_service),
    config: ConfigData = Depends(get_app_config),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    db_healthy = await database_service.health_check()
    checks = {
        "database": {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "postgresql",
            "pool": database_service.get_pool_status(),
        }
    }

    body = {
        "status": "ready" if db_healthy else "not_ready",
        "checks": checks,
        "environment": config.app.environment,
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
