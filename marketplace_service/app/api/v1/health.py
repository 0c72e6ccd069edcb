"""
Health API endpoint
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from marketplace_service.app.core.database import database_manager
from marketplace_service.app.core.settings import get_settings
from marketplace_service.app.schemas.auth import HealthResponse
from marketplace_service.app.utils.logging import setup_marketplace_logging
from marketplace_service.app.utils.service_health import MarketplaceHealthChecker

logger = setup_marketplace_logging("health")
settings = get_settings()

router = APIRouter()


async def database_check() -> Dict[str, Any]:
    await database_manager.ping()
    return {"status": "healthy", "component": "database"}


health_checker = MarketplaceHealthChecker(settings.SERVICE_NAME)
health_checker.add_check("database", database_check)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> JSONResponse:
    """Ping the database; 200 when reachable, 500 otherwise."""

    result = await health_checker.run_checks()
    healthy = result["status"] == "healthy"
    if not healthy:
        logger.error("Health check failed", extra={"checks": result["checks"]})

    body = HealthResponse(
        status=result["status"],
        message="Database connection is healthy"
        if healthy
        else "Database connection failed",
        service=result["service"],
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=result["checks"],
    )
    return JSONResponse(
        status_code=200 if healthy else 500,
        content=body.model_dump(by_alias=True),
    )
