# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the error
    envelopes and the filings request/response schemas used by routers.
    ``BaseHTTPSchema`` stays internal to this package.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from sec_filings_agent.adapters.schemas.http.envelopes import ErrorEnvelope, ErrorObject
from sec_filings_agent.adapters.schemas.http.filings_schemas import (
    CompanyProfileHTTP,
    CompanyProfileRequest,
    EntityRequest,
    FilingHTTP,
    FilingsListHTTP,
    HealthHTTP,
    InsiderTradesHTTP,
    InsiderTradesRequest,
    LatestFilingHTTP,
    LatestFilingRequest,
    RecentFilingsRequest,
    StreamFilingsRequest,
    TickerToCikHTTP,
    TickerToCikRequest,
)

__all__ = [
    # Envelopes
    "ErrorObject",
    "ErrorEnvelope",
    # Requests
    "EntityRequest",
    "TickerToCikRequest",
    "RecentFilingsRequest",
    "LatestFilingRequest",
    "CompanyProfileRequest",
    "InsiderTradesRequest",
    "StreamFilingsRequest",
    # Responses
    "TickerToCikHTTP",
    "FilingHTTP",
    "FilingsListHTTP",
    "LatestFilingHTTP",
    "CompanyProfileHTTP",
    "InsiderTradesHTTP",
    "HealthHTTP",
]
