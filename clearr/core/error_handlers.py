"""
Error handlers for the FastAPI application.

Every failure leaves the service as the uniform envelope
``{"success": false, "message": ..., "statusCode": ...}``.
"""

from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
import time
import asyncio
from typing import Dict, Any, Optional, List

from clearr.config import get_settings
from clearr.core.exceptions import ClearrException, ErrorCode
from clearr.schemas.base import envelope

logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Maps exceptions to error envelopes and keeps per-code error counts.
    """

    def __init__(self):
        self.error_counts: Dict[str, int] = {}
        self.last_error_time: Dict[str, float] = {}

    async def handle_clearr_exception(
        self,
        request: Request,
        exc: ClearrException
    ) -> JSONResponse:
        """
        Handle domain exceptions raised by services.

        Args:
            request: FastAPI request object
            exc: ClearrException instance

        Returns:
            JSONResponse carrying the error envelope
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{type(exc).__name__} in request {request_id}: {exc.message}",
            extra={
                'request_id': request_id,
                'error_code': exc.error_code.value,
                'status_code': exc.status_code,
                'details': exc.details,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )

        self._track_error(exc.error_code.value)

        return self._create_error_response(
            message=exc.message,
            status_code=exc.status_code,
            exc=exc,
        )

    async def handle_validation_error(
        self,
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """
        Handle request body/query validation errors as 400s with field details.
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        validation_errors = []
        for error in exc.errors():
            validation_errors.append({
                'field': '.'.join(str(loc) for loc in error['loc']),
                'message': error['msg'],
                'type': error['type'],
            })

        logger.warning(
            f"Validation error in request {request_id}: {len(validation_errors)} field errors",
            extra={
                'request_id': request_id,
                'validation_errors': validation_errors,
                'request_path': request.url.path
            }
        )

        self._track_error(ErrorCode.VALIDATION_ERROR.value)

        return self._create_error_response(
            message="Validation failed",
            status_code=400,
            errors=validation_errors,
        )

    async def handle_http_exception(
        self,
        request: Request,
        exc: HTTPException
    ) -> JSONResponse:
        """
        Handle routing-level HTTP errors (unknown route, wrong method).
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        logger.warning(
            f"HTTP exception in request {request_id}: {exc.status_code} - {exc.detail}",
            extra={
                'request_id': request_id,
                'status_code': exc.status_code,
                'request_path': request.url.path
            }
        )

        message = str(exc.detail)
        if exc.status_code == 404 and message == "Not Found":
            message = f"Route {request.url.path} not found"

        return self._create_error_response(
            message=message,
            status_code=exc.status_code,
            headers=getattr(exc, 'headers', None),
        )

    async def handle_timeout_error(
        self,
        request: Request,
        exc: asyncio.TimeoutError
    ) -> JSONResponse:
        request_id = getattr(request.state, 'request_id', 'unknown')

        logger.error(
            f"Request timeout in request {request_id}",
            extra={
                'request_id': request_id,
                'request_path': request.url.path,
                'request_method': request.method
            }
        )

        self._track_error(ErrorCode.PROCESSING_TIMEOUT.value)

        return self._create_error_response(
            message="Request processing timed out",
            status_code=500,
            exc=exc,
        )

    async def handle_generic_exception(
        self,
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """
        Handle unexpected exceptions with full error logging.
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        logger.error(
            f"Unhandled exception in request {request_id}: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                'request_id': request_id,
                'exception_type': type(exc).__name__,
                'request_path': request.url.path,
                'request_method': request.method,
            }
        )

        self._track_error(ErrorCode.INTERNAL_SERVER_ERROR.value)

        return self._create_error_response(
            message="Internal server error",
            status_code=500,
            exc=exc,
        )

    def _create_error_response(
        self,
        message: str,
        status_code: int,
        exc: Optional[BaseException] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """
        Create the failure envelope.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            exc: Exception whose traceback is exposed in development
            errors: Field-level validation errors
            headers: Extra response headers

        Returns:
            JSONResponse with the standard envelope
        """
        extra: Dict[str, Any] = {}
        if errors is not None:
            extra["errors"] = errors
        if exc is not None and get_settings().is_development():
            extra["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )

        body = envelope(message, status_code=status_code, success=False, **extra)
        return JSONResponse(
            status_code=status_code,
            content=jsonable_encoder(body),
            headers=headers,
        )

    def _track_error(self, error_code: str) -> None:
        """
        Track error frequency for monitoring and alerting.
        """
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1
        self.last_error_time[error_code] = time.time()

        if self.error_counts[error_code] % 10 == 0:
            logger.warning(
                f"High frequency error detected: {error_code} occurred {self.error_counts[error_code]} times"
            )

    def get_error_statistics(self) -> Dict[str, Any]:
        """
        Get error statistics for the health endpoint.
        """
        current_time = time.time()

        return {
            'error_counts': dict(self.error_counts),
            'recent_errors': {
                code: count for code, count in self.error_counts.items()
                if current_time - self.last_error_time.get(code, 0) < 3600  # Last hour
            },
            'total_errors': sum(self.error_counts.values())
        }


# Global error handler instance
error_handler = ErrorHandler()


def setup_error_handlers(app):
    """
    Set up all error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ClearrException)
    async def clearr_exception_handler(request: Request, exc: ClearrException):
        return await error_handler.handle_clearr_exception(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await error_handler.handle_validation_error(request, exc)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return await error_handler.handle_http_exception(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Convert Starlette HTTPException to FastAPI HTTPException
        fastapi_exc = HTTPException(status_code=exc.status_code, detail=exc.detail, headers=exc.headers)
        return await error_handler.handle_http_exception(request, fastapi_exc)

    @app.exception_handler(asyncio.TimeoutError)
    async def timeout_exception_handler(request: Request, exc: asyncio.TimeoutError):
        return await error_handler.handle_timeout_error(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return await error_handler.handle_generic_exception(request, exc)
