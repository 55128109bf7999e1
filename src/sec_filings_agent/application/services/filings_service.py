# src/sec_filings_agent/application/services/filings_service.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""
Filings Service

Purpose:
    Single entry point for collaborators (HTTP routers, agents) over the
    EDGAR core: ticker resolution, submissions snapshots, filtered filing
    listings and change streams.

Layer: application/services

Notes:
    - The service owns its caches. Build one per process and share it; every
      subscriber stream then shares the same ticker and submissions caches.
    - Identifiers are CIKs in any accepted form (padded, unpadded, int).
    - Listings are most-recent-first, checked rather than assumed.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Callable, Iterable

from sec_filings_agent.application.use_cases.filings.stream_filing_changes import (
    StreamFilingChangesRequest,
    StreamFilingChangesUseCase,
    Waiter,
    wait_for_cancellation,
)
from sec_filings_agent.domain.entities.edgar_filing import FilingRecord
from sec_filings_agent.domain.entities.entity_identifier import canonical_cik
from sec_filings_agent.domain.entities.stream_events import StreamItem
from sec_filings_agent.domain.entities.submissions import SubmissionsSnapshot
from sec_filings_agent.domain.exceptions.edgar import EdgarValidationError
from sec_filings_agent.domain.services.filing_normalizer import (
    INSIDER_FORMS,
    ensure_most_recent_first,
    filter_by_forms,
    normalize_recent_filings,
)
from sec_filings_agent.infrastructure.caching.submissions_cache import SubmissionsCache
from sec_filings_agent.infrastructure.caching.ticker_cache import TickerCache
from sec_filings_agent.infrastructure.external_apis.edgar.client import EdgarFetcher
from sec_filings_agent.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class FilingsService:
    """Facade over the ticker cache, submissions cache and change poller.

    Args:
        fetcher: EDGAR fetcher shared by both caches.
        waiter: Interruptible sleep used between stream polls.
        clock: Monotonic clock for the submissions cache.
    """

    def __init__(
        self,
        fetcher: EdgarFetcher,
        *,
        waiter: Waiter = wait_for_cancellation,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = fetcher.settings
        self._fetcher = fetcher
        self._tickers = TickerCache(fetcher)
        self._submissions = SubmissionsCache(
            fetcher,
            default_ttl_s=settings.submissions_ttl_s,
            clock=clock,
        )
        self._stream = StreamFilingChangesUseCase(
            self._submissions,
            ttl_s=settings.stream_ttl_s,
            waiter=waiter,
        )

    async def aclose(self) -> None:
        """Release the underlying HTTP resources."""
        await self._fetcher.aclose()

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    async def resolve_entity(self, ticker: str) -> str:
        """Resolve a ticker symbol to its canonical CIK.

        Raises:
            UnknownTicker: If the symbol is not listed upstream.
        """
        return await self._tickers.resolve(ticker)

    async def resolve_identifier(
        self,
        *,
        ticker: str | None = None,
        cik: str | int | None = None,
    ) -> str:
        """Return a canonical CIK from either a CIK or a ticker.

        A provided CIK wins; otherwise the ticker is resolved.

        Raises:
            EdgarValidationError: If neither is provided, or the CIK is invalid.
            UnknownTicker: If the ticker is not listed upstream.
        """
        if cik is not None and str(cik).strip():
            return canonical_cik(cik)
        if ticker is not None and ticker.strip():
            return await self.resolve_entity(ticker)
        raise EdgarValidationError("Provide either a ticker or a cik.")

    # ------------------------------------------------------------------ #
    # Snapshots and listings
    # ------------------------------------------------------------------ #

    async def get_snapshot(self, identifier: str | int, ttl: float | None = None) -> SubmissionsSnapshot:
        """Return the submissions snapshot for ``identifier`` via the cache."""
        return await self._submissions.get(identifier, ttl=ttl)

    async def list_filings(
        self,
        identifier: str | int,
        forms: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> list[FilingRecord]:
        """List recent filings, most recent first.

        Args:
            identifier: Entity CIK.
            forms: Optional form filter (case-insensitive).
            limit: Optional maximum number of records (>= 1).

        Returns:
            Normalized records after filtering and limiting.

        Raises:
            EdgarValidationError: If ``limit`` is below 1.
            PermanentUpstreamError: If upstream ordering is violated.
        """
        _, records = await self.list_filings_with_snapshot(identifier, forms=forms, limit=limit)
        return records

    async def list_filings_with_snapshot(
        self,
        identifier: str | int,
        forms: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> tuple[SubmissionsSnapshot, list[FilingRecord]]:
        """Like ``list_filings``, also returning the snapshot the records came from.

        Callers that render entity fields next to the records use this so both
        come from one cache read.
        """
        if limit is not None and limit < 1:
            raise EdgarValidationError("limit must be at least 1.", details={"limit": limit})

        snapshot = await self.get_snapshot(identifier)
        records = normalize_recent_filings(snapshot.recent)
        ensure_most_recent_first(records)
        filtered = filter_by_forms(records, forms)
        return snapshot, filtered if limit is None else filtered[:limit]

    async def get_latest_filing(
        self,
        identifier: str | int,
        forms: Iterable[str] | None = None,
    ) -> FilingRecord | None:
        """Return the most recent filing matching ``forms``, if any."""
        filings = await self.list_filings(identifier, forms=forms, limit=1)
        return filings[0] if filings else None

    async def get_company_profile(self, identifier: str | int) -> SubmissionsSnapshot:
        """Return the entity profile carried by its submissions snapshot."""
        return await self.get_snapshot(identifier)

    async def list_insider_trades(self, identifier: str | int, limit: int = 10) -> list[FilingRecord]:
        """List recent insider ownership filings (forms 3, 4 and 5)."""
        return await self.list_filings(identifier, forms=INSIDER_FORMS, limit=limit)

    # ------------------------------------------------------------------ #
    # Change stream
    # ------------------------------------------------------------------ #

    def subscribe_to_changes(
        self,
        identifier: str | int,
        *,
        forms: Iterable[str] | None = None,
        poll_interval_s: float = 30.0,
        max_events: int = 50,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[StreamItem]:
        """Open a change stream for ``identifier``.

        Validation happens here, before the stream starts.

        Returns:
            A lazy, single-pass async iterator of events ending in a summary.

        Raises:
            EdgarValidationError: If any parameter is out of bounds.
        """
        req = StreamFilingChangesRequest(
            cik=str(identifier),
            forms=tuple(forms) if forms is not None else None,
            poll_interval_s=poll_interval_s,
            max_events=max_events,
        )
        return self._stream.execute(req, cancel if cancel is not None else asyncio.Event())
