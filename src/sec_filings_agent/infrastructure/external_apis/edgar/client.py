# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR Fetcher: resilient, instrumented, async.

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with a per-attempt timeout.
* Bounded, jittered exponential retries for transient failures; honors
  ``Retry-After`` (seconds form).
* A mandatory identifying ``User-Agent`` checked before any I/O.
* Prometheus metrics and structured logs per attempt.

Transient failures are ``httpx.TransportError`` (connection, read, timeout)
and the statuses in ``TRANSIENT_STATUSES``. Everything else is returned to the
caller untouched.

Exhaustion is asymmetric:
    * a transient *HTTP response* on the last attempt is returned, never
      raised; the caller inspects the status.
    * a *transport* failure on the last attempt raises
      ``TransientUpstreamError``; httpx types never cross this boundary.

``fetch_json`` layers status checking and JSON decoding on top of ``fetch``.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Final

import httpx

from sec_filings_agent.domain.exceptions.edgar import (
    EdgarMappingError,
    EdgarPreconditionError,
    PermanentUpstreamError,
    TransientUpstreamError,
)
from sec_filings_agent.infrastructure.external_apis.edgar.settings import EdgarSettings
from sec_filings_agent.infrastructure.logging.logger import get_json_logger, get_request_id
from sec_filings_agent.infrastructure.observability.metrics_edgar import (
    get_edgar_errors_total,
    get_edgar_gateway_latency_seconds,
    get_edgar_http_status_total,
    get_edgar_retries_total,
)
from sec_filings_agent.infrastructure.resilience.retry import RetryPolicy, Sleep, retry_async

logger = get_json_logger(__name__)

TRANSIENT_STATUSES: Final[frozenset[int]] = frozenset({408, 429, 500, 502, 503, 504})
MIN_USER_AGENT_LENGTH: Final[int] = 10
BODY_EXCERPT_CHARS: Final[int] = 200

_ACCEPT: Final[str] = "application/json,text/plain,*/*"


def parse_retry_after(val: str | None) -> float | None:
    """Parse the HTTP ``Retry-After`` header (seconds form only).

    Args:
        val: Header value as a string, or ``None``.

    Returns:
        Seconds to wait if parseable, otherwise ``None``.
    """
    if not val:
        return None
    try:
        return max(0.0, float(val))
    except (TypeError, ValueError):
        return None


def is_transient(outcome: object) -> bool:
    """Return True when an attempt outcome should be retried."""
    if isinstance(outcome, httpx.TransportError):
        return True
    if isinstance(outcome, httpx.Response):
        return outcome.status_code in TRANSIENT_STATUSES
    return False


class EdgarFetcher:
    """Backoff-retrying HTTP fetcher for SEC endpoints."""

    def __init__(
        self,
        settings: EdgarSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the fetcher.

        Args:
            settings: Provider settings loaded from environment or DI.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            retry_policy: Optional retry schedule; built from settings when
                omitted.
            sleep: Awaitable used between attempts (injectable for tests).
        """
        self._settings = settings
        self._timeout = float(settings.timeout_s)
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=self._timeout)
        self._retry = retry_policy or RetryPolicy(
            total=settings.max_retries,
            base=settings.base_backoff_s,
            jitter=settings.max_jitter_s,
        )
        self._sleep = sleep

        self._latency = get_edgar_gateway_latency_seconds()
        self._errors = get_edgar_errors_total()
        self._status_total = get_edgar_http_status_total()
        self._retries_total = get_edgar_retries_total()

    @property
    def settings(self) -> EdgarSettings:
        """Settings this fetcher was built with."""
        return self._settings

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def fetch(self, url: str, *, endpoint: str = "generic") -> httpx.Response:
        """GET ``url`` with retries and return the final response.

        Args:
            url: Absolute URL to fetch.
            endpoint: Logical endpoint name for metrics and logs.

        Returns:
            The first non-transient response, or the last transient response
            once the retry budget is spent.

        Raises:
            EdgarPreconditionError: If the user agent is missing or too short.
            TransientUpstreamError: If the last attempt failed at transport level.
        """
        headers = {"User-Agent": self._require_user_agent(), "Accept": _ACCEPT}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        async def _call() -> httpx.Response:
            response = await self._client.get(url, headers=headers, timeout=self._timeout)
            self._status_total.labels(endpoint, str(response.status_code)).inc()
            return response

        def _retry_after(response: httpx.Response) -> float | None:
            return parse_retry_after(response.headers.get("Retry-After"))

        def _on_retry(attempt: int, outcome: Exception | httpx.Response, delay: float) -> None:
            if isinstance(outcome, httpx.Response):
                reason = f"http_{outcome.status_code}"
            else:
                reason = type(outcome).__name__
            self._retries_total.labels(endpoint, reason).inc()
            logger.warning(
                "edgar.fetch.retry",
                extra={
                    "url": url,
                    "endpoint": endpoint,
                    "attempt": attempt + 1,
                    "reason": reason,
                    "delay_s": round(delay, 3),
                },
            )

        start = time.perf_counter()
        outcome = "success"
        try:
            response = await retry_async(
                _call,
                policy=self._retry,
                retry_on=is_transient,
                delay_hint=_retry_after,
                on_retry=_on_retry,
                sleep=self._sleep,
            )
        except httpx.TransportError as exc:
            outcome = "error"
            self._errors.labels(endpoint, type(exc).__name__).inc()
            logger.error(
                "edgar.fetch.transport_exhausted",
                extra={"url": url, "endpoint": endpoint, "error": str(exc)},
            )
            raise TransientUpstreamError(
                f"EDGAR transport failure for {url}: {exc}",
                details={"url": url, "endpoint": endpoint, "error": type(exc).__name__},
            ) from exc
        finally:
            self._latency.labels(endpoint=endpoint, outcome=outcome).observe(
                time.perf_counter() - start
            )

        if response.status_code in TRANSIENT_STATUSES:
            logger.warning(
                "edgar.fetch.retries_exhausted",
                extra={"url": url, "endpoint": endpoint, "status": response.status_code},
            )
        return response

    async def fetch_json(self, url: str, *, endpoint: str = "generic") -> Any:
        """GET ``url`` and decode a successful JSON body.

        Raises:
            EdgarPreconditionError: If the user agent is missing or too short.
            TransientUpstreamError: On transport exhaustion or a final
                transient status.
            PermanentUpstreamError: On any other non-2xx status.
            EdgarMappingError: If a 2xx body is not valid JSON.
        """
        response = await self.fetch(url, endpoint=endpoint)

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                self._errors.labels(endpoint, "invalid_json").inc()
                raise EdgarMappingError(
                    f"EDGAR response was not valid JSON for {url}.",
                    details={"url": url, "endpoint": endpoint, "error": str(exc)},
                ) from exc

        status = response.status_code
        excerpt = response.text[:BODY_EXCERPT_CHARS]
        message = f"SEC fetch failed {status} {response.reason_phrase} for {url}"
        if excerpt:
            message = f"{message}: {excerpt}"
        details = {"url": url, "endpoint": endpoint}
        self._errors.labels(endpoint, f"http_{status}").inc()

        if status in TRANSIENT_STATUSES:
            raise TransientUpstreamError(
                message, status=status, body_excerpt=excerpt, details=details
            )
        raise PermanentUpstreamError(message, status=status, body_excerpt=excerpt, details=details)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _require_user_agent(self) -> str:
        ua = (self._settings.user_agent or "").strip()
        if len(ua) < MIN_USER_AGENT_LENGTH:
            raise EdgarPreconditionError(
                "Missing SEC user agent (required by SEC). Set EDGAR_USER_AGENT or "
                'SEC_USER_AGENT, e.g. "sec-filings-agent/0.1 (you@example.com)".',
                details={"min_length": MIN_USER_AGENT_LENGTH},
            )
        return ua
