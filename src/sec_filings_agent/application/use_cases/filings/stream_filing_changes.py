# src/sec_filings_agent/application/use_cases/filings/stream_filing_changes.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""
Use Case: Stream Filing Changes

Purpose:
    Poll an entity's submissions on a fixed interval and emit an event each
    time the latest (optionally form-filtered) filing changes identity.

Layer: application/use_cases

Notes:
    - Reads go through the submissions cache with the short stream TTL, so
      concurrent subscribers on one entity share fetches.
    - A failing poll iteration becomes an ``ErrorEvent`` and the loop carries
      on; the stream itself never raises once started.
    - The stream always ends with exactly one ``StreamSummary``. Reaching
      ``max_events`` ends it at once, without a trailing sleep.
    - The first successful poll always emits (the cursor starts empty).
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Final

from sec_filings_agent.domain.entities.entity_identifier import canonical_cik
from sec_filings_agent.domain.entities.stream_events import (
    ErrorEvent,
    FilingEvent,
    StreamCursor,
    StreamItem,
    StreamStatus,
    StreamSummary,
)
from sec_filings_agent.domain.exceptions.edgar import (
    EdgarValidationError,
    StreamPollError,
)
from sec_filings_agent.domain.services.filing_normalizer import (
    ensure_most_recent_first,
    filter_by_forms,
    normalize_forms,
    normalize_recent_filings,
    primary_doc_url_for,
)
from sec_filings_agent.infrastructure.caching.submissions_cache import (
    TTL_STREAM_S,
    SubmissionsCache,
)
from sec_filings_agent.infrastructure.logging.logger import get_json_logger
from sec_filings_agent.infrastructure.observability.metrics_edgar import (
    get_edgar_stream_events_total,
)

logger = get_json_logger(__name__)

MIN_POLL_INTERVAL_S: Final[float] = 5.0
MAX_POLL_INTERVAL_S: Final[float] = 300.0
MIN_MAX_EVENTS: Final[int] = 1
MAX_MAX_EVENTS: Final[int] = 200

#: ``(cancel, timeout) -> cancelled``; returns early once ``cancel`` is set.
Waiter = Callable[[asyncio.Event, float], Awaitable[bool]]


async def wait_for_cancellation(cancel: asyncio.Event, timeout: float) -> bool:
    """Sleep up to ``timeout`` seconds, waking early if ``cancel`` is set.

    Returns:
        True if cancellation was observed, False if the timeout elapsed.
    """
    try:
        await asyncio.wait_for(cancel.wait(), timeout)
    except TimeoutError:
        return False
    return True


@dataclass(frozen=True)
class StreamFilingChangesRequest:
    """Parameters of one change-stream subscription.

    Attributes:
        cik: Entity identifier; stored in canonical (unpadded) form.
        forms: Optional form filter (case-insensitive).
        poll_interval_s: Seconds between polls, 5–300.
        max_events: Filing events after which the stream ends, 1–200.

    Raises:
        EdgarValidationError: If any bound is violated or ``cik`` is invalid.
    """

    cik: str
    forms: Sequence[str] | None = None
    poll_interval_s: float = 30.0
    max_events: int = 50

    def __post_init__(self) -> None:
        object.__setattr__(self, "cik", canonical_cik(self.cik))
        wanted = normalize_forms(self.forms)
        object.__setattr__(self, "forms", tuple(sorted(wanted)) if wanted else None)

        if not MIN_POLL_INTERVAL_S <= self.poll_interval_s <= MAX_POLL_INTERVAL_S:
            raise EdgarValidationError(
                f"poll_interval_s must be between {MIN_POLL_INTERVAL_S:g} and "
                f"{MAX_POLL_INTERVAL_S:g} seconds.",
                details={"poll_interval_s": self.poll_interval_s},
            )
        if not MIN_MAX_EVENTS <= self.max_events <= MAX_MAX_EVENTS:
            raise EdgarValidationError(
                f"max_events must be between {MIN_MAX_EVENTS} and {MAX_MAX_EVENTS}.",
                details={"max_events": self.max_events},
            )


class StreamFilingChangesUseCase:
    """Change-detection poller over the submissions cache.

    Args:
        submissions: Shared submissions cache.
        ttl_s: Freshness window applied to each poll's read.
        waiter: Interruptible sleep between polls (injectable for tests).
    """

    def __init__(
        self,
        submissions: SubmissionsCache,
        *,
        ttl_s: float = TTL_STREAM_S,
        waiter: Waiter = wait_for_cancellation,
    ) -> None:
        self._submissions = submissions
        self._ttl = ttl_s
        self._waiter = waiter
        self._events = get_edgar_stream_events_total()

    async def execute(
        self,
        req: StreamFilingChangesRequest,
        cancel: asyncio.Event,
    ) -> AsyncIterator[StreamItem]:
        """Run the poll loop until ``max_events`` or cancellation.

        Args:
            req: Validated subscription parameters.
            cancel: Cancellation token; setting it ends the stream promptly.

        Yields:
            ``FilingEvent`` and ``ErrorEvent`` items, then one ``StreamSummary``.
        """
        cursor = StreamCursor()
        status = StreamStatus.SUCCEEDED
        logger.info(
            "edgar.stream.start",
            extra={
                "cik": req.cik,
                "forms": list(req.forms) if req.forms else None,
                "poll_interval_s": req.poll_interval_s,
                "max_events": req.max_events,
            },
        )

        while cursor.emitted < req.max_events:
            if cancel.is_set():
                status = StreamStatus.CANCELLED
                break

            cursor.polls += 1
            try:
                event = await self._poll_once(req, cursor)
            except Exception as exc:  # noqa: BLE001 - every poll failure becomes data
                failure = StreamPollError(exc)
                logger.warning(
                    "edgar.stream.poll_error",
                    extra={"cik": req.cik, "poll": cursor.polls, "error": failure.message},
                )
                self._events.labels("error").inc()
                yield ErrorEvent(message=failure.message, code=failure.code, retryable=True)
            else:
                if event is not None:
                    logger.info(
                        "edgar.stream.event",
                        extra={
                            "cik": req.cik,
                            "accession": event.filing.accession_number,
                            "form": event.filing.form,
                            "emitted": cursor.emitted,
                        },
                    )
                    self._events.labels("filing").inc()
                    yield event

            if cursor.emitted >= req.max_events:
                break
            if await self._waiter(cancel, req.poll_interval_s):
                status = StreamStatus.CANCELLED
                break

        logger.info(
            "edgar.stream.end",
            extra={
                "cik": req.cik,
                "status": status.value,
                "emitted": cursor.emitted,
                "polls": cursor.polls,
            },
        )
        self._events.labels("summary").inc()
        yield StreamSummary(status=status, emitted_count=cursor.emitted)

    async def _poll_once(
        self,
        req: StreamFilingChangesRequest,
        cursor: StreamCursor,
    ) -> FilingEvent | None:
        snapshot = await self._submissions.get(req.cik, ttl=self._ttl)
        records = normalize_recent_filings(snapshot.recent)
        ensure_most_recent_first(records)
        candidates = filter_by_forms(records, req.forms)
        if not candidates:
            return None

        latest = candidates[0]
        if latest.accession_number == cursor.last_accession:
            return None

        cursor.last_accession = latest.accession_number
        cursor.emitted += 1
        return FilingEvent(
            cik=req.cik,
            name=snapshot.name,
            tickers=snapshot.tickers,
            filing=latest,
            primary_doc_url=primary_doc_url_for(req.cik, latest),
        )
