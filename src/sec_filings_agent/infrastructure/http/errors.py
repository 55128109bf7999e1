# src/sec_filings_agent/infrastructure/http/errors.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""HTTP error envelopes and FastAPI exception handlers.

Every error leaves the service as ``{"error": {code, http_status, message,
details?, trace_id?}}``. Domain errors carry their own ``code``; this module
only decides the HTTP status.
"""

from __future__ import annotations

from typing import Any, Final

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.responses import Response

from sec_filings_agent.domain.exceptions.edgar import (
    EdgarError,
    EdgarMappingError,
    EdgarPreconditionError,
    EdgarValidationError,
    PermanentUpstreamError,
    TransientUpstreamError,
    UnknownTicker,
)
from sec_filings_agent.infrastructure.logging.logger import get_json_logger, get_request_id

logger = get_json_logger(__name__)

# Most specific first: EdgarMappingError is a PermanentUpstreamError.
_STATUS_BY_ERROR: Final[tuple[tuple[type[EdgarError], int], ...]] = (
    (UnknownTicker, 404),
    (EdgarValidationError, 400),
    (EdgarMappingError, 502),
    (PermanentUpstreamError, 502),
    (TransientUpstreamError, 503),
    (EdgarPreconditionError, 500),
)


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "trace_id", None) or get_request_id()


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def status_for(exc: EdgarError) -> int:
    """Return the HTTP status for a domain error (500 when unmapped)."""
    for error_type, http_status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return http_status
    return 500


async def handle_edgar_error(request: Request, exc: EdgarError) -> Response:
    http_status = status_for(exc)
    log = logger.error if http_status >= 500 else logger.info
    log(
        "http.edgar_error",
        extra={"path": request.url.path, "code": exc.code, "http_status": http_status},
    )
    payload = error_envelope(
        code=exc.code,
        http_status=http_status,
        message=exc.message,
        details=exc.details or None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=http_status, content=jsonable(payload))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": exc.errors()},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=jsonable(payload))


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception("http.unhandled_error", extra={"path": request.url.path})
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        details=None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)


def jsonable(payload: dict[str, Any]) -> Any:
    """Encode pydantic error contexts (which may hold exceptions) for JSON."""
    return jsonable_encoder(payload, custom_encoder={Exception: str})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on ``app``."""
    app.add_exception_handler(EdgarError, handle_edgar_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)
