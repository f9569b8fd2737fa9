"""Error Handlers — global exception handlers for the ledger API.

Invariants:
    - Every error body uses the FederationError envelope: code, category, severity,
      timestamp and a kind/tier/field context
    - RequestValidationError → 400 VALIDATION_ERROR naming the offending query parameter
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details
    - context.kind is the ledger from the request path when one was addressed

Design Decisions:
    - Validation and unhandled errors are wrapped in a FederationError so clients
      parse a single error shape whatever layer failed
    - Pydantic locations are reduced to the parameter name ("start", not "query.start")
    - Extracted from main.py to keep the entry point's import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ledgerfed.core.errors import (
    ErrorCategory, ErrorContext, ErrorSeverity, FederationError,
)

logger = logging.getLogger(__name__)

_PARAM_SOURCES = {"query", "path", "body", "header"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_federation_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _ledger_kind(request: Request) -> str | None:
    return request.path_params.get("kind")


def _parameter_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _PARAM_SOURCES:
        parts = parts[1:]
    return ".".join(parts)


def _register_federation_error_handler(app: FastAPI) -> None:
    """Register federation domain/infrastructure error handler."""

    @app.exception_handler(FederationError)
    async def federation_error_handler(request: Request, exc: FederationError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"FederationError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "kind": exc.context.kind or _ledger_kind(request),
                "tier": exc.context.tier,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register query parameter validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        details = _validation_details(exc)
        kind = _ledger_kind(request)
        logger.warning(
            f"Invalid ledger query on {request.url.path}: "
            f"{', '.join(d['field'] for d in details)}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path, "kind": kind},
        )
        error = FederationError(
            message=_validation_message(details),
            code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            context=ErrorContext(
                kind=kind, field=details[0]["field"] if details else None,
            ),
            http_status=status.HTTP_400_BAD_REQUEST,
        )
        body = error.to_response()
        body["error"]["details"] = details
        return JSONResponse(status_code=error.http_status, content=body)


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — logs the traceback, returns a bare INTERNAL_ERROR envelope."""
        kind = _ledger_kind(request)
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.url.path}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path, "kind": kind},
        )
        error = FederationError(
            message="An unexpected error occurred",
            code="INTERNAL_ERROR",
            category=ErrorCategory.INTERNAL,
            severity=ErrorSeverity.CRITICAL,
            context=ErrorContext(kind=kind),
        )
        return JSONResponse(status_code=error.http_status, content=error.to_response())


def _validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": _parameter_name(e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]


def _validation_message(details: list[dict]) -> str:
    if not details:
        return "Invalid ledger query"
    fields = sorted({d["field"] for d in details})
    return f"Invalid ledger query parameter(s): {', '.join(fields)}"
