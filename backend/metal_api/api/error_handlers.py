"""Error Handlers — global exception handlers mapping failures onto the envelope.

Invariants:
    - MetalApiError → envelope with its own status and HTTP code
    - RequestValidationError → 422 VALIDATION_ERROR with field-level message
    - Exception (catch-all) → 500 FAILURE; message exposed only if settings allow

Design Decisions:
    - Three-layer handler: domain (MetalApiError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep the entry point small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError

from metal_api.api.responses import envelope, failure
from metal_api.config import get_settings
from metal_api.core.errors import MetalApiError, ResponseStatus
from metal_api.core.validation import INVALID_PARAMS_PREFIX

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error."


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_api_error_handler(app: FastAPI) -> None:
    """Register typed API error handler."""

    @app.exception_handler(MetalApiError)
    async def api_error_handler(request: Request, exc: MetalApiError):
        """Handle all Metal API client/infrastructure errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"{exc.__class__.__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "entity": exc.context.entity,
                "operation": exc.context.operation,
            },
        )
        return failure(exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic request validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle malformed bodies and bad query/path parameters."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": ResponseStatus.VALIDATION_ERROR.value},
        )
        return envelope(
            ResponseStatus.VALIDATION_ERROR,
            f"{INVALID_PARAMS_PREFIX}, {_format_request_errors(exc)}",
            http_status=422,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — any unexpected error becomes an internal server error."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        message = str(exc) if get_settings().expose_error_messages else ""
        return envelope(
            ResponseStatus.FAILURE,
            message or INTERNAL_ERROR_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _format_request_errors(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
