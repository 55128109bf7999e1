# src/sec_filings_agent/infrastructure/logging/logger.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Structured JSON logging utilities.

This module exposes an idempotent root configurator and a per-module logger
factory that produce JSON logs suitable for ingestion by log pipelines.

Features:
    * Stable keys: ``ts``, ``level``, ``logger``, ``message``.
    * Automatic enrichment with ``request_id`` and ``stream_id`` via contextvars,
      so every line written while serving a request or a change stream can be
      correlated.
    * Fallback enrichment via record attributes or environment variables.
    * Fields passed through ``extra={...}`` are merged into the payload.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
    log.info("edgar.fetch.retry", extra={"url": url, "attempt": 2})
"""

from __future__ import annotations

import json
import logging
import os
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "set_log_context",
    "clear_log_context",
    "get_request_id",
    "get_stream_id",
]

_REQUEST_ID_ENV_KEY = "REQUEST_ID"

# Standard LogRecord attributes; anything else on a record came from ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime"}
)

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("sec_filings_request_id", default=None)
_STREAM_ID_CTX: ContextVar[str | None] = ContextVar("sec_filings_stream_id", default=None)


def set_log_context(*, request_id: str | None = None, stream_id: str | None = None) -> None:
    """Set correlation identifiers on the current context.

    Args:
        request_id: Correlation identifier from ``X-Request-ID``, if any.
        stream_id: Identifier of the change stream being served, if any.

    Notes:
        Additive: passing only one argument leaves the other unchanged.
    """
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if stream_id is not None:
        _STREAM_ID_CTX.set(stream_id)


def clear_log_context() -> None:
    """Reset both correlation identifiers on the current context."""
    _REQUEST_ID_CTX.set(None)
    _STREAM_ID_CTX.set(None)


def get_request_id() -> str | None:
    """Return the current request id from contextvars, if any."""
    return _REQUEST_ID_CTX.get(None)


def get_stream_id() -> str | None:
    """Return the current stream id from contextvars, if any."""
    return _STREAM_ID_CTX.get(None)


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and optional extras."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object.

        Args:
            record: Logging record.

        Returns:
            JSON-encoded log line.
        """
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid: str | None = (
            getattr(record, "request_id", None)
            or _REQUEST_ID_CTX.get(None)
            or os.getenv(_REQUEST_ID_ENV_KEY)
        )
        if rid:
            payload["request_id"] = rid

        sid: str | None = getattr(record, "stream_id", None) or _STREAM_ID_CTX.get(None)
        if sid:
            payload["stream_id"] = sid

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in payload or key in ("request_id", "stream_id"):
                continue
            payload[key] = value

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Initialize the root logger with a JSON stream handler (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    if isinstance(resolved, str):
        resolved = resolved.upper()
    root.setLevel(resolved)

    if root.handlers:
        # Already configured; avoid duplicate handlers on reload.
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module-specific logger backed by the JSON root handler.

    This does *not* implicitly configure the root logger. Call
    :func:`configure_root_logging` once at startup.

    Args:
        name: Logger name, typically ``__name__`` of the caller.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
