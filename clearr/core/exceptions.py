"""
Custom exceptions for the Clearr backend.

Every domain failure is raised as a ``ClearrException`` subclass and rendered
into the uniform response envelope by ``clearr.core.error_handlers``.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Translation pipeline
    CONTENT_BLOCKED = "CONTENT_BLOCKED"
    NO_DEFAULT_MODE = "NO_DEFAULT_MODE"
    GENERATION_FAILED = "GENERATION_FAILED"

    # Collaborators (phone verification, storage)
    DEPENDENCY_FAILED = "DEPENDENCY_FAILED"

    PROCESSING_TIMEOUT = "PROCESSING_TIMEOUT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ClearrException(Exception):
    """Base exception for the Clearr backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class ValidationError(ClearrException):
    """Raised when request input breaks a domain rule."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details=details,
            status_code=400
        )


class UnauthorizedError(ClearrException):
    """Raised when the bearer token is missing or invalid."""

    def __init__(self, message: str = "Authentication required", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.UNAUTHORIZED,
            details=details,
            status_code=401
        )


class ForbiddenError(ClearrException):
    """Raised when a caller touches a resource owned by somebody else."""

    def __init__(self, message: str = "Access denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.FORBIDDEN,
            details=details,
            status_code=403
        )


class NotFoundError(ClearrException):
    """Raised when an entity is missing, inactive or not owned by the caller."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.NOT_FOUND,
            details=details,
            status_code=404
        )


class ContentBlockedError(ClearrException):
    """Raised when the safety filter rejects a message."""

    def __init__(self, message: str = "Cannot process this type of content", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONTENT_BLOCKED,
            details=details,
            status_code=400
        )


class NoDefaultModeError(ClearrException):
    """Raised when a request needs the default mode and the user has none."""

    def __init__(
        self,
        message: str = "No default mode found. Please create a mode first.",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.NO_DEFAULT_MODE,
            details=details,
            status_code=400
        )


class GenerationError(ClearrException):
    """Raised when the language model call fails or returns nothing."""

    def __init__(self, message: str = "Failed to generate translation", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.GENERATION_FAILED,
            details=details,
            status_code=500
        )


class DependencyError(ClearrException):
    """Raised when an external collaborator (e.g. phone verification) fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.DEPENDENCY_FAILED,
            details=details,
            status_code=500
        )
