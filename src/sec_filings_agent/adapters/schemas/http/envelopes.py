# src/sec_filings_agent/adapters/schemas/http/envelopes.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    Document the canonical error envelope in OpenAPI. The runtime payload is
    built by ``infrastructure.http.errors.error_envelope``; these models keep
    the published schema in step with it.

Error codes (UPPER_SNAKE_CASE, stable across releases):
    - UNKNOWN_TICKER
    - VALIDATION_ERROR
    - UPSTREAM_ERROR
    - UPSTREAM_UNAVAILABLE
    - UPSTREAM_SCHEMA_ERROR
    - CONFIGURATION_ERROR
    - INTERNAL_ERROR
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["ErrorObject", "ErrorEnvelope"]


class ErrorObject(BaseModel):
    """Structured error object inside ErrorEnvelope."""

    model_config = ConfigDict(
        title="ErrorObject",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "code": "UNKNOWN_TICKER",
                    "http_status": 404,
                    "message": "Unknown ticker: ZZZZ",
                    "details": {"ticker": "ZZZZ"},
                    "trace_id": "req-123",
                }
            ]
        },
    )

    code: str = Field(..., description="Stable machine-readable error code.")
    http_status: int = Field(..., ge=100, le=599, description="HTTP status code.")
    message: str = Field(..., description="Human-readable message.")
    details: dict[str, Any] | None = Field(default=None, description="Error context.")
    trace_id: str | None = Field(default=None, description="Request correlation id.")


class ErrorEnvelope(BaseModel):
    """Top-level error envelope: ``{"error": {...}}``."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid")

    error: ErrorObject
