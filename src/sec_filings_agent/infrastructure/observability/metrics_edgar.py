# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR metrics.

Purpose:
    Provide Prometheus metrics for EDGAR calls and the layers above them:
      * Latency histograms.
      * Error counters by reason.
      * HTTP status distribution.
      * Retry counters.
      * Cache hit/miss counters.
      * Change-stream event counters.

Design:
    - Functions return lazily created singleton metric instances so repeated
      client/cache construction never re-registers a collector.
"""

from __future__ import annotations

from typing import Any

from prometheus_client import Counter, Histogram

_edgar_gateway_latency_seconds: Any | None = None
_edgar_errors_total: Any | None = None
_edgar_http_status_total: Any | None = None
_edgar_retries_total: Any | None = None
_edgar_cache_operations_total: Any | None = None
_edgar_stream_events_total: Any | None = None


def get_edgar_gateway_latency_seconds() -> Any:
    """Return (and lazily create) the EDGAR request latency histogram."""
    global _edgar_gateway_latency_seconds
    if _edgar_gateway_latency_seconds is None:
        _edgar_gateway_latency_seconds = Histogram(
            "edgar_gateway_latency_seconds",
            "Latency of EDGAR fetches (including retries) in seconds.",
            ["endpoint", "outcome"],
        )
    return _edgar_gateway_latency_seconds


def get_edgar_errors_total() -> Any:
    """Return (and lazily create) the EDGAR error counter."""
    global _edgar_errors_total
    if _edgar_errors_total is None:
        _edgar_errors_total = Counter(
            "edgar_errors_total",
            "Total number of EDGAR fetch errors surfaced to callers.",
            ["endpoint", "reason"],
        )
    return _edgar_errors_total


def get_edgar_http_status_total() -> Any:
    """Return (and lazily create) the EDGAR HTTP status counter."""
    global _edgar_http_status_total
    if _edgar_http_status_total is None:
        _edgar_http_status_total = Counter(
            "edgar_http_status_total",
            "EDGAR HTTP responses by status code.",
            ["endpoint", "status"],
        )
    return _edgar_http_status_total


def get_edgar_retries_total() -> Any:
    """Return (and lazily create) the EDGAR retry counter."""
    global _edgar_retries_total
    if _edgar_retries_total is None:
        _edgar_retries_total = Counter(
            "edgar_retries_total",
            "Total number of EDGAR retries.",
            ["endpoint", "reason"],
        )
    return _edgar_retries_total


def get_edgar_cache_operations_total() -> Any:
    """Return (and lazily create) the EDGAR cache lookup counter."""
    global _edgar_cache_operations_total
    if _edgar_cache_operations_total is None:
        _edgar_cache_operations_total = Counter(
            "edgar_cache_operations_total",
            "EDGAR read-through cache lookups by outcome.",
            ["cache", "result"],
        )
    return _edgar_cache_operations_total


def get_edgar_stream_events_total() -> Any:
    """Return (and lazily create) the change-stream event counter."""
    global _edgar_stream_events_total
    if _edgar_stream_events_total is None:
        _edgar_stream_events_total = Counter(
            "edgar_stream_events_total",
            "Items emitted by filing change streams.",
            ["kind"],
        )
    return _edgar_stream_events_total
