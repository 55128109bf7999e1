# src/sec_filings_agent/infrastructure/http/middleware/request_id.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Request ID Middleware.

Summary:
    Guarantees every request carries a correlation identifier and echoes it
    back as ``x-request-id``. The value is attached to
    ``request.state.trace_id`` (read by the error envelopes) and stored in the
    logging contextvar so every log line of the request, including lines
    written while a change stream is being served, carries ``request_id``.

Design:
    * An inbound ``x-request-id`` is reused only when it is 1-128 characters
      of ``[A-Za-z0-9-_.:@]``; otherwise a UUIDv4 is generated, so client
      text never reaches response headers or log lines unchecked.
    * No I/O; header parsing is synchronous.

Layer:
    infrastructure/http/middleware
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Awaitable, Callable
from typing import Final

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from sec_filings_agent.infrastructure.logging.logger import set_log_context

REQUEST_ID_HEADER = "x-request-id"

_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")


def _sanitize_inbound(raw: str | None) -> str | None:
    """Return a usable inbound request id, or ``None``."""
    if raw is None:
        return None
    value = raw.strip()
    return value if _SAFE_RE.match(value) else None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach/echo a correlation id for every request."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Attach the request id to the request/response cycle."""
        request_id = _sanitize_inbound(request.headers.get(REQUEST_ID_HEADER)) or str(uuid.uuid4())

        request.state.trace_id = request_id
        set_log_context(request_id=request_id)

        response = await call_next(request)

        if REQUEST_ID_HEADER not in response.headers:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response


__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
]
