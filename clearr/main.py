"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from clearr.config import get_settings
from clearr.core.dependencies import ServiceContainer
from clearr.core.error_handlers import setup_error_handlers
from clearr.core.logging import configure_logging
from clearr.schemas.base import respond

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    Handles startup and shutdown events with proper service lifecycle.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    try:
        container = getattr(app.state, 'service_container', None) or ServiceContainer()
        await container.initialize_services()
        app.state.service_container = container

        logger.info("Application startup complete")

        yield

    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise

    finally:
        logger.info("Shutting down application")

        if hasattr(app.state, 'service_container'):
            await app.state.service_container.cleanup_services()

        logger.info("Application shutdown complete")


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: Pre-built service container; one is built from settings
            at startup when omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    configure_logging(settings.log_level.value, settings.log_format, settings.log_file)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    if container is not None:
        app.state.service_container = container

    # Add CORS middleware with configuration
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    setup_error_handlers(app)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log requests and responses with timing information."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request {request_id} started: {request.method} {request.url.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.url.path,
                'client_ip': request.client.host if request.client else 'unknown'
            }
        )

        response = await call_next(request)

        processing_time = (time.time() - start_time) * 1000

        logger.info(
            f"Request {request_id} completed: {response.status_code} ({processing_time:.2f}ms)",
            extra={
                'request_id': request_id,
                'status_code': response.status_code,
                'processing_time_ms': processing_time
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response

    # Include API routers
    from clearr.api.health_endpoints import router as health_router
    from clearr.api.auth_endpoints import router as auth_router
    from clearr.api.translation_endpoints import router as translation_router
    from clearr.api.user_endpoints import router as user_router
    from clearr.api.mode_endpoints import router as mode_router
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(translation_router)
    app.include_router(user_router)
    app.include_router(mode_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic service information."""
        return respond(
            f"Welcome to {settings.app_name}",
            {"version": settings.app_version, "status": "running"},
        )

    return app


# Create application instance
app = create_app()
