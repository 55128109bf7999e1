# src/sec_filings_agent/domain/entities/stream_events.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Filing change stream items.

A change stream yields zero or more ``FilingEvent``/``ErrorEvent`` items and
always ends with exactly one ``StreamSummary``.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sec_filings_agent.domain.entities.edgar_filing import FilingRecord


class StreamStatus(str, Enum):
    """Terminal status of a change stream."""

    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FilingEvent:
    """A newly observed latest filing."""

    cik: str
    name: str | None
    tickers: tuple[str, ...]
    filing: FilingRecord
    primary_doc_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready payload for this event."""
        return {
            "kind": "filing",
            "cik": self.cik,
            "name": self.name,
            "tickers": list(self.tickers),
            "filing": {**self.filing.to_dict(), "primary_doc_url": self.primary_doc_url},
        }


@dataclass(frozen=True)
class ErrorEvent:
    """A failed poll iteration; the stream keeps going."""

    message: str
    code: str = "stream_poll_error"
    retryable: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready payload for this event."""
        return {
            "kind": "error",
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


@dataclass(frozen=True)
class StreamSummary:
    """Final item of every change stream."""

    status: StreamStatus
    emitted_count: int

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready payload for the summary."""
        return {
            "kind": "summary",
            "status": self.status.value,
            "output": {"events_sent": self.emitted_count},
        }


@dataclass
class StreamCursor:
    """Per-subscription progress; lives only for one stream invocation."""

    last_accession: str | None = None
    emitted: int = 0
    polls: int = field(default=0, repr=False)


StreamItem = FilingEvent | ErrorEvent | StreamSummary
