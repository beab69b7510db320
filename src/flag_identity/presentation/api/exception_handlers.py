"""Centralized exception handlers for the FastAPI application.

Every identity failure is a client error. Whatever its code, an
:class:`IdentityError` becomes HTTP 400, so clients cannot tell failure
kinds apart by status alone; the ``code`` field carries the specifics.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from flag_identity.exceptions import ErrorCode, IdentityError

logger = logging.getLogger(__name__)

CLIENT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST
INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "code": code,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(IdentityError)
    async def identity_exception_handler(
        request: Request,
        exc: IdentityError,
    ) -> JSONResponse:
        logger.warning(
            "Identity error on %s %s: %s (code=%s, details=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
            exc.details,
        )
        return _create_error_response(
            status_code=CLIENT_ERROR_STATUS,
            message=exc.message,
            code=exc.code.value,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed payloads are invalid input like any failed field rule."""
        logger.warning(
            "Malformed request on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
        )
        return _create_error_response(
            status_code=CLIENT_ERROR_STATUS,
            message="Request body is malformed",
            code=ErrorCode.INVALID_INPUT.value,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format."""
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="An internal error occurred",
            code=INTERNAL_ERROR_CODE,
        )
