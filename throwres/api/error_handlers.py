"""Error Handlers — the signal interceptor plus global exception handlers.

Invariants:
    - ResponseSignal → DispatchInterceptor writes the response the signal describes
    - RequestValidationError → field-level error details
    - ThrowResError → structured JSON with error code, message, severity
    - Exception (catch-all) → never leaks internal details
    - Failures raised by a terminal action continue through the remaining
      handlers: ThrowResError subclasses get their envelope, anything else
      reaches the catch-all

Design Decisions:
    - Signal handler registered first and matched by class: Starlette resolves
      handlers through the exception's MRO, so only ResponseSignal values
      reach the interceptor and everything else follows the existing chain
    - Continuation re-raises: forwarding a value means letting Starlette keep
      propagating it as if the interceptor were absent
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from throwres.core.errors import ErrorCategory, ErrorSeverity, ThrowResError
from throwres.core.signals import ResponseSignal
from throwres.infrastructure.starlette_sink import StarletteResponseSink
from throwres.services.dispatch_interceptor import DispatchInterceptor

logger = logging.getLogger(__name__)


def register_error_handlers(
    app: FastAPI, interceptor: DispatchInterceptor,
) -> None:
    """Register the signal interceptor and global error handlers on the app."""
    _register_signal_handler(app, interceptor)
    _register_validation_error_handler(app)
    _register_throwres_error_handler(app)
    _register_generic_error_handler(app)


def _forward(exc: BaseException) -> None:
    raise exc


def _register_signal_handler(
    app: FastAPI, interceptor: DispatchInterceptor,
) -> None:
    """Register the ResponseSignal handler backed by interceptor."""

    @app.exception_handler(ResponseSignal)
    async def response_signal_handler(request: Request, exc: ResponseSignal):
        """Execute the raised signal against a fresh sink."""
        sink = StarletteResponseSink()
        await interceptor.dispatch(exc, request, sink, _forward)
        return sink.to_response()


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ]
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            "Invalid request data", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, details=details,
        )


def _register_throwres_error_handler(app: FastAPI) -> None:
    """Register throwres error handler."""

    @app.exception_handler(ThrowResError)
    async def throwres_error_handler(request: Request, exc: ThrowResError):
        """Handle errors raised while building, validating or writing signals."""
        exc.context.path = exc.context.path or request.url.path
        logger.error(
            f"ThrowResError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR",
            "An unexpected error occurred", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL,
        )


def _error_response(
    status_code: int, code: str, message: str,
    category: ErrorCategory, severity: ErrorSeverity, **extra,
) -> JSONResponse:
    error = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
        **extra,
    }
    return JSONResponse(status_code=status_code, content={"error": error})
