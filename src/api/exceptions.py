"""
Error handlers for the print preview API.
Provides consistent error handling across all endpoints.

The exception classes themselves live in core.exceptions; this module turns
them into JSON responses.
"""

import asyncio
import logging
import traceback
from functools import wraps

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.exceptions import PipelineError, PreviewException

logger = logging.getLogger(__name__)


# Exception handlers for FastAPI
async def preview_exception_handler(request: Request, exc: PreviewException) -> JSONResponse:
    """
    Handler for print preview exceptions.

    Args:
        request: FastAPI request
        exc: PreviewException instance

    Returns:
        JSON response with error details
    """
    if isinstance(exc, PipelineError) and exc.status_code < 500:
        logger.warning(f"{exc.__class__.__name__}: {exc.message}", extra={"details": exc.details})
    else:
        logger.error(f"{exc.__class__.__name__}: {exc.message}", extra={"details": exc.details})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details, "type": exc.__class__.__name__},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handler for request validation errors.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSON response with validation error details
    """
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"][1:]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(f"Validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Validation failed", "details": errors, "type": "ValidationError"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for unexpected exceptions.

    Args:
        request: FastAPI request
        exc: Any exception

    Returns:
        JSON response with generic error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    debug_mode = getattr(request.app.state, "debug", False)

    if debug_mode:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "details": {
                    "exception": str(exc),
                    "type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                "type": "InternalError",
            },
        )
    else:
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": {}, "type": "InternalError"},
        )


# Exception mapping for safe_endpoint decorator
# Maps exception types to (status_code, error_message, log_level, detail_builder)
EXCEPTION_MAPPING = {
    ValidationError: (400, "Validation failed", "warning", lambda e: {"details": e.errors()}),
    KeyError: (400, "Missing required field", "error", lambda e: {"field": str(e)}),
    ValueError: (400, "Invalid value", "warning", lambda e: {"details": str(e)}),
    MemoryError: (503, "Session storage exhausted", "error", lambda e: {"details": str(e)}),
}


# Decorator for safe endpoint execution
def safe_endpoint(func):
    """
    Decorator to wrap endpoint functions with error handling.

    Automatically catches and handles common exceptions using EXCEPTION_MAPPING.
    Preview exceptions pass through to preview_exception_handler.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            # Handle both sync and async functions
            if asyncio.iscoroutinefunction(func):
                return await func(*args, **kwargs)
            else:
                return func(*args, **kwargs)

        except (PreviewException, HTTPException):
            # Re-raise known exceptions (handled by exception handler)
            raise

        except Exception as e:
            # Check if exception type is in mapping
            exception_type = type(e)

            if exception_type in EXCEPTION_MAPPING:
                status_code, error_msg, log_level, detail_builder = EXCEPTION_MAPPING[
                    exception_type
                ]

                # Log with appropriate level
                log_message = f"{exception_type.__name__} in {func.__name__}: {e}"
                if log_level == "warning":
                    logger.warning(log_message)
                else:
                    logger.error(log_message)

                # Build response detail
                detail = {"error": error_msg}
                detail.update(detail_builder(e))

                raise HTTPException(status_code=status_code, detail=detail)

            else:
                # Catch all other exceptions
                logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
                raise HTTPException(
                    status_code=500, detail={"error": "Internal server error", "details": str(e)}
                )

    return wrapper


# Helper function to register all exception handlers
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(PreviewException, preview_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")


# Standard Messages
class SuccessMessages:
    """Standard success messages."""

    IMAGE_UPLOADED = "Your image has been successfully uploaded"
    FILTER_APPLIED = "Applied {filter} filter to your image"
    IMAGE_REMOVED = "The image has been removed from your design"
