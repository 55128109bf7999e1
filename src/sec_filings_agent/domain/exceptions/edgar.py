# src/sec_filings_agent/domain/exceptions/edgar.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""
EDGAR domain exceptions.

Purpose:
    Provide EDGAR-specific error types for configuration, lookup, upstream and
    mapping failures.

Layer:
    domain

Notes:
    - Infrastructure translates transport errors (httpx) into these types;
      httpx exceptions never cross the client boundary.
    - Transient vs. permanent upstream failures are distinct types so callers
      can branch on retryability without inspecting status codes.
    - Stream poll failures are converted into in-band error events by the
      poller and never escape a stream.
"""

from __future__ import annotations

from typing import Any


class EdgarError(Exception):
    """Base class for EDGAR-related domain errors.

    Args:
        message: Human-readable error message (safe for clients).
        details: Optional machine-readable diagnostic payload.
    """

    code: str = "EDGAR_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        return self.message


class EdgarPreconditionError(EdgarError):
    """Raised when a local precondition for calling EDGAR is not met.

    The SEC requires an identifying ``User-Agent`` on every request. A missing
    or too-short value is fatal and is raised before any network I/O.
    """

    code = "CONFIGURATION_ERROR"


class EdgarValidationError(EdgarError):
    """Raised when caller-supplied input is invalid."""

    code = "VALIDATION_ERROR"


class UnknownTicker(EdgarError):
    """Raised when a ticker symbol is absent from the ticker index."""

    code = "UNKNOWN_TICKER"

    def __init__(self, ticker: str) -> None:
        super().__init__(f"Unknown ticker: {ticker}", details={"ticker": ticker})
        self.ticker = ticker


class EdgarUpstreamError(EdgarError):
    """Base class for failures reported by (or while reaching) EDGAR.

    Args:
        message: Human-readable error message.
        status: Final HTTP status, or ``None`` for transport-level failures.
        body_excerpt: First characters of the response body, if any.
        details: Optional machine-readable diagnostic payload.
    """

    code = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body_excerpt: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged: dict[str, Any] = dict(details or {})
        if status is not None:
            merged.setdefault("status", status)
        if body_excerpt:
            merged.setdefault("body_excerpt", body_excerpt)
        super().__init__(message, details=merged)
        self.status = status
        self.body_excerpt = body_excerpt


class TransientUpstreamError(EdgarUpstreamError):
    """Raised when a retryable failure persists after the retry budget is spent."""

    code = "UPSTREAM_UNAVAILABLE"


class PermanentUpstreamError(EdgarUpstreamError):
    """Raised on a non-retryable upstream status or an upstream contract violation."""

    code = "UPSTREAM_ERROR"


class EdgarMappingError(PermanentUpstreamError):
    """Raised when raw EDGAR data cannot be mapped into domain entities safely."""

    code = "UPSTREAM_SCHEMA_ERROR"


class StreamPollError(EdgarError):
    """Wraps a failure raised inside a single poll iteration.

    Args:
        cause: The underlying exception.
    """

    code = "stream_poll_error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__, details={"type": type(cause).__name__})
        self.cause = cause
