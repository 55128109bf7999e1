# src/sec_filings_agent/infrastructure/caching/submissions_cache.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Per-entity submissions cache (read-through, TTL evaluated at read time).

Synopsis:
    Memoizes the latest ``SubmissionsSnapshot`` per CIK. Each read decides
    freshness with the caller's TTL, so one cache serves both bursty point
    lookups (long TTL) and change-stream polls (short TTL).

Design:
    * Key: canonical CIK. Request path: 10-digit padded CIK. The two forms are
      derived from one another and never mixed.
    * Entries are replaced wholesale, and only after a successful fetch. A
      failed fetch leaves the previous entry untouched and propagates; stale
      data is never served in place of an error.
    * Concurrent misses for the same CIK share one fetch (single-flight).
    * The entry timestamp is taken when the fetch starts.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final, Generic, TypeVar

from sec_filings_agent.domain.entities.entity_identifier import canonical_cik, padded_cik
from sec_filings_agent.domain.entities.submissions import SubmissionsSnapshot
from sec_filings_agent.infrastructure.caching.singleflight import SingleFlight
from sec_filings_agent.infrastructure.external_apis.edgar.client import EdgarFetcher
from sec_filings_agent.infrastructure.external_apis.edgar.mappers import snapshot_from_payload
from sec_filings_agent.infrastructure.logging.logger import get_json_logger
from sec_filings_agent.infrastructure.observability.metrics_edgar import (
    get_edgar_cache_operations_total,
)

__all__ = [
    "CacheEntry",
    "SubmissionsCache",
    "TTL_SUBMISSIONS_S",
    "TTL_STREAM_S",
]

logger = get_json_logger(__name__)

V = TypeVar("V")

#: Point-in-time lookups; absorbs bursts of related calls for one entity.
TTL_SUBMISSIONS_S: Final[float] = 30.0

#: Change-stream polls; forces near-real-time refetches.
TTL_STREAM_S: Final[float] = 5.0


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value and the monotonic time it was fetched."""

    value: V
    fetched_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Return True if the entry is younger than ``ttl`` seconds."""
        return now - self.fetched_at < ttl


class SubmissionsCache:
    """Short-TTL read-through cache of submissions snapshots."""

    def __init__(
        self,
        fetcher: EdgarFetcher,
        *,
        default_ttl_s: float = TTL_SUBMISSIONS_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            fetcher: EDGAR fetcher used on misses.
            default_ttl_s: TTL applied when a caller passes none.
            clock: Monotonic clock in seconds (injectable for tests).
        """
        self._fetcher = fetcher
        self._default_ttl = default_ttl_s
        self._clock = clock
        self._entries: dict[str, CacheEntry[SubmissionsSnapshot]] = {}
        self._flight: SingleFlight[SubmissionsSnapshot] = SingleFlight()
        self._ops = get_edgar_cache_operations_total()

    def peek(self, cik: str | int) -> CacheEntry[SubmissionsSnapshot] | None:
        """Return the current entry for ``cik`` without fetching."""
        return self._entries.get(canonical_cik(cik))

    async def get(self, cik: str | int, ttl: float | None = None) -> SubmissionsSnapshot:
        """Return a snapshot for ``cik`` no older than ``ttl`` seconds.

        Args:
            cik: CIK in any accepted form (padded, unpadded, int).
            ttl: Freshness window in seconds; defaults to the cache default.

        Returns:
            The cached snapshot on a fresh hit, otherwise a newly fetched one.

        Raises:
            EdgarValidationError: If ``cik`` is not numeric.
            EdgarUpstreamError: If the fetch fails (previous entry is kept).
        """
        key = canonical_cik(cik)
        effective_ttl = self._default_ttl if ttl is None else ttl

        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock(), effective_ttl):
            self._ops.labels("submissions", "hit").inc()
            return entry.value

        self._ops.labels("submissions", "stale" if entry is not None else "miss").inc()
        return await self._flight.do(key, lambda: self._refresh(key))

    async def _refresh(self, key: str) -> SubmissionsSnapshot:
        url = self._fetcher.settings.submissions_url(padded_cik(key))
        started_at = self._clock()
        payload = await self._fetcher.fetch_json(url, endpoint="submissions")
        snapshot = snapshot_from_payload(payload)
        self._entries[key] = CacheEntry(value=snapshot, fetched_at=started_at)
        logger.debug(
            "edgar.submissions.refreshed",
            extra={"cik": key, "recent": len(snapshot.recent) if snapshot.recent else 0},
        )
        return snapshot
