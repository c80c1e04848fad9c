"""
Health check endpoints.

- GET /health and /api/v1/health: service, database and error-rate status
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
import logging
import time
from datetime import datetime, timezone

from clearr.config import get_settings
from clearr.core.dependencies import ServiceContainer, get_service_container
from clearr.core.error_handlers import error_handler
from clearr.schemas.base import respond

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


def _check_database(container: ServiceContainer) -> dict:
    try:
        with container.session_factory() as session:
            session.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


async def health_check(container: ServiceContainer = Depends(get_service_container)):
    """Report whether the service and its database are usable."""
    settings = get_settings()
    database = _check_database(container)
    healthy = container.is_initialized and database["status"] == "healthy"

    data = {
        "status": "healthy" if healthy else "unhealthy",
        "version": settings.app_version,
        "environment": settings.environment.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptimeSeconds": round(time.time() - _app_start_time, 2),
        "database": database,
        "errors": error_handler.get_error_statistics(),
    }
    if healthy:
        return respond("Service is healthy", data)
    return respond("Service is unhealthy", data, status_code=503)


router.add_api_route("/health", health_check, methods=["GET"])
router.add_api_route("/api/v1/health", health_check, methods=["GET"])
