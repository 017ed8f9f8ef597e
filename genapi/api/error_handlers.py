"""Error Responses: the one writer of classified errors, plus app-level handlers.

Invariants:
    - write_error() logs exactly once (warning for 4xx, error for 5xx) and
      returns the {"error": {...}} envelope with the error's own status
    - The error's context records the operation and group it surfaced in
    - App-level handlers classify through classify_error(), so plain routes next
      to operation groups answer with the same envelope and statuses as pipeline routes

Design Decisions:
    - Pipeline routes write their own failures through write_error(); nothing
      they raise reaches the app-level handlers
    - Unclassified exceptions on plain routes default to the masking converter
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from genapi.core.errors import (
    ErrorConverter,
    GenApiError,
    classify_error,
    masking_convert_error,
    request_decode_error,
)

logger = logging.getLogger(__name__)


def write_error(
    error: GenApiError,
    extra: dict[str, Any],
    cause: BaseException | None = None,
    log: logging.Logger = logger,
) -> JSONResponse:
    """Log a classified error with its dispatch extras and render its envelope."""
    if error.context.operation is None:
        error.context.operation = extra.get("operation")
    if error.context.group is None:
        error.context.group = extra.get("group")
    extra = {**extra, "http_status": error.http_status, "error_code": error.code}

    label = extra.get("operation") or extra.get("path", "request")
    if error.http_status >= 500:
        log.error(f"{label} failed: {error.message}", exc_info=cause, extra=extra)
    else:
        log.warning(f"{label} rejected: {error.message}", extra=extra)
    return JSONResponse(status_code=error.http_status, content=error.to_response())


def request_extra(request: Request) -> dict[str, Any]:
    return {"method": request.method, "path": request.url.path}


def register_error_handlers(
    app: FastAPI,
    convert_error: ErrorConverter = masking_convert_error,
    masked: bool = True,
) -> None:
    """Answer errors raised by plain FastAPI routes with the classified envelope."""

    async def classified_error_handler(request: Request, exc: Exception) -> JSONResponse:
        error = classify_error(exc, convert_error, masked)
        cause = exc if error.http_status >= 500 else None
        return write_error(error, request_extra(request), cause)

    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        return write_error(request_decode_error(exc.errors()), request_extra(request))

    app.add_exception_handler(GenApiError, classified_error_handler)
    app.add_exception_handler(StarletteHTTPException, classified_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, classified_error_handler)
