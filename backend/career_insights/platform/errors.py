"""
Consistent error handling for the career insights API.

All API errors MUST use these standard error classes and shapes.
Stack traces and downstream error messages are NEVER returned to clients.

Standard HTTP status codes:
- 400: Bad Request (validation errors)
- 401: Unauthorized (no/invalid session)
- 404: Not Found
- 500: Operation failed / internal error
- 503: Service Unavailable
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Base application error with consistent error shape.

    All custom errors should inherit from this class.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to API error response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(AppError):
    """Validation error (400)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class AuthenticationError(AppError):
    """No authenticated session (401)."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            code="AUTHENTICATION_ERROR",
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class OperationFailedError(AppError):
    """
    A downstream failure during an operation (500).

    The message is fixed and user-facing. The original error is logged by
    the raiser and chained as __cause__, never serialised.
    """

    def __init__(self, message: str):
        super().__init__(
            code="OPERATION_FAILED",
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class ServiceUnavailableError(AppError):
    """Service unavailable (503)."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(
            code="SERVICE_UNAVAILABLE",
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return str(uuid.uuid4())


def get_correlation_id(request: Request) -> str:
    """
    Get correlation ID from request or generate new one.

    Checks X-Correlation-ID header first, then request state.
    """
    correlation_id = request.headers.get("X-Correlation-ID")
    if correlation_id:
        return correlation_id

    if hasattr(request.state, "correlation_id"):
        return request.state.correlation_id

    return generate_correlation_id()


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all exceptions and returns consistent error responses.

    IMPORTANT: Stack traces are NEVER returned to clients.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = get_correlation_id(request)
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except AppError as e:
            logger.warning(
                "Application error",
                extra={
                    "correlation_id": correlation_id,
                    "error_code": e.code,
                    "status_code": e.status_code,
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=e.status_code,
                content=e.to_dict(),
                headers={"X-Correlation-ID": correlation_id},
            )

        except Exception as e:
            # Full exception stays server-side
            logger.exception(
                "Unhandled exception",
                extra={
                    "correlation_id": correlation_id,
                    "error_type": type(e).__name__,
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": {
                        "code": "INTERNAL_ERROR",
                        "message": "An unexpected error occurred",
                        "details": {"correlation_id": correlation_id},
                    }
                },
                headers={"X-Correlation-ID": correlation_id},
            )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return body and parameter validation failures as ValidationError (400).

    Only location, message and type are echoed back; submitted values are not.
    """
    correlation_id = get_correlation_id(request)
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    logger.info(
        "Request validation failed",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
        }
    )
    error = ValidationError("Invalid request", details={"errors": errors})
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(),
        headers={"X-Correlation-ID": correlation_id},
    )
