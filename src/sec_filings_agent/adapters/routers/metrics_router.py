# src/sec_filings_agent/adapters/routers/metrics_router.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (``/metrics``).

Exposes the default registry in text format. The EDGAR collectors are
created on first use, so they are touched here once to make their series
visible on the very first scrape.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from sec_filings_agent.infrastructure.observability.metrics_edgar import (
    get_edgar_cache_operations_total,
    get_edgar_errors_total,
    get_edgar_gateway_latency_seconds,
    get_edgar_http_status_total,
    get_edgar_retries_total,
    get_edgar_stream_events_total,
)

router = APIRouter(tags=["Observability"])


def _register_collectors() -> None:
    get_edgar_gateway_latency_seconds()
    get_edgar_errors_total()
    get_edgar_http_status_total()
    get_edgar_retries_total()
    get_edgar_cache_operations_total()
    get_edgar_stream_events_total()


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Return all metrics in Prometheus text exposition format."""
    _register_collectors()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
