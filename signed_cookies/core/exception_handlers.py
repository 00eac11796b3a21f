"""
Global Exception Handlers
Renders cookie subsystem errors as JSON for the FastAPI host.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
import logging

from signed_cookies.utils.errors import (
    BaseCookieException,
    ErrorCode,
    ErrorResponse,
    log_error
)

logger = logging.getLogger(__name__)


async def cookie_exception_handler(request: Request, exc: BaseCookieException) -> JSONResponse:
    """
    Handle cookie subsystem exceptions with structured responses.
    """
    log_error(
        error=exc,
        context=f"{request.method} {request.url.path}",
        additional_data={
            "status_code": exc.status_code,
            "error_code": exc.code.value
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with generic error response.
    """
    log_error(
        error=exc,
        context=f"{request.method} {request.url.path}",
        additional_data={"exception_type": type(exc).__name__}
    )

    # Don't expose internal error details to users
    content = ErrorResponse(
        error="An unexpected error occurred. Please try again.",
        code=ErrorCode.INTERNAL_ERROR,
        suggestion="If the problem persists, please contact support."
    ).model_dump()

    return JSONResponse(
        status_code=500,
        content=content
    )


def setup_exception_handlers(app):
    """
    Set up all exception handlers for the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(BaseCookieException, cookie_exception_handler)

    # Catch-all for unexpected exceptions
    app.add_exception_handler(Exception, general_exception_handler)
