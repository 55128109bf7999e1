# src/sec_filings_agent/infrastructure/caching/ticker_cache.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Ticker → CIK resolution cache.

Synopsis:
    Lazily downloads ``company_tickers.json`` once and keeps the resulting
    index for the lifetime of the cache object. There is no refresh or
    invalidation path.

Design:
    * One bulk fetch no matter how many callers race the first lookup
      (single-flight on a static key).
    * A failed load caches nothing; the next lookup retries it.
    * Symbols are matched upper-cased. Unknown symbols raise ``UnknownTicker``
      and are never retried.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

from typing import Final

from sec_filings_agent.domain.exceptions.edgar import EdgarValidationError, UnknownTicker
from sec_filings_agent.infrastructure.caching.singleflight import SingleFlight
from sec_filings_agent.infrastructure.external_apis.edgar.client import EdgarFetcher
from sec_filings_agent.infrastructure.external_apis.edgar.mappers import ticker_index_from_payload
from sec_filings_agent.infrastructure.logging.logger import get_json_logger
from sec_filings_agent.infrastructure.observability.metrics_edgar import (
    get_edgar_cache_operations_total,
)

__all__ = ["TickerCache"]

logger = get_json_logger(__name__)

_INDEX_KEY: Final[str] = "company_tickers"


class TickerCache:
    """Process-lifetime ticker index backed by one bulk download."""

    def __init__(self, fetcher: EdgarFetcher) -> None:
        """Initialize the cache.

        Args:
            fetcher: EDGAR fetcher used for the bulk download.
        """
        self._fetcher = fetcher
        self._index: dict[str, str] | None = None
        self._flight: SingleFlight[dict[str, str]] = SingleFlight()
        self._ops = get_edgar_cache_operations_total()

    @property
    def loaded(self) -> bool:
        """Whether the ticker index has been downloaded."""
        return self._index is not None

    async def resolve(self, ticker: str) -> str:
        """Return the canonical CIK for ``ticker``.

        Args:
            ticker: Ticker symbol in any case.

        Returns:
            Canonical (unpadded) CIK string.

        Raises:
            EdgarValidationError: If ``ticker`` is blank.
            UnknownTicker: If the symbol is not in the index.
        """
        symbol = ticker.strip().upper()
        if not symbol:
            raise EdgarValidationError("Ticker must not be empty.", details={"ticker": ticker})

        index = await self._get_index()
        cik = index.get(symbol)
        if cik is None:
            raise UnknownTicker(ticker)
        return cik

    async def _get_index(self) -> dict[str, str]:
        if self._index is not None:
            self._ops.labels("tickers", "hit").inc()
            return self._index
        self._ops.labels("tickers", "miss").inc()
        return await self._flight.do(_INDEX_KEY, self._load)

    async def _load(self) -> dict[str, str]:
        url = self._fetcher.settings.company_tickers_url
        logger.info("edgar.tickers.load.start", extra={"url": url})
        payload = await self._fetcher.fetch_json(url, endpoint="company_tickers")
        index = ticker_index_from_payload(payload)
        self._index = index
        logger.info("edgar.tickers.load.success", extra={"symbols": len(index)})
        return index
