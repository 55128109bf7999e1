# src/sec_filings_agent/adapters/schemas/http/filings_schemas.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""HTTP Schemas: ticker mapping, filings, company profile and change stream.

Purpose:
    Define the request bodies accepted by the filings router and the
    response projections of ``FilingRecord`` and ``SubmissionsSnapshot``.

Design:
    * Strict Pydantic models with extra="forbid".
    * snake_case fields; dates stay as upstream ships them (``YYYY-MM-DD``).
    * Entity requests accept a ``ticker`` or a ``cik``; when both are sent the
      CIK wins.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from sec_filings_agent.adapters.schemas.http.base import BaseHTTPSchema
from sec_filings_agent.domain.entities.edgar_filing import FilingRecord
from sec_filings_agent.domain.entities.submissions import SubmissionsSnapshot
from sec_filings_agent.domain.services.filing_normalizer import primary_doc_url_for

# --------------------------------------------------------------------------- #
# Requests                                                                     #
# --------------------------------------------------------------------------- #


class TickerToCikRequest(BaseHTTPSchema):
    """Body of ``POST /v1/mappings/ticker-to-cik``."""

    ticker: str = Field(..., min_length=1, examples=["AAPL"])


class EntityRequest(BaseHTTPSchema):
    """Identifies one entity by ticker or CIK.

    Attributes:
        ticker: Ticker symbol (any case).
        cik: CIK, padded or unpadded, as string or number.
    """

    ticker: str | None = Field(default=None, examples=["AAPL"])
    cik: str | int | None = Field(default=None, examples=["320193"])

    @model_validator(mode="after")
    def _require_identifier(self) -> EntityRequest:
        has_ticker = bool(self.ticker)
        has_cik = self.cik is not None and str(self.cik).strip() != ""
        if not (has_ticker or has_cik):
            raise ValueError("Provide either 'ticker' or 'cik'.")
        return self


class RecentFilingsRequest(EntityRequest):
    """Body of ``POST /v1/filings/recent``."""

    forms: list[str] | None = Field(default=None, examples=[["10-K", "10-Q"]])
    limit: int = Field(default=10, ge=1, le=50)


class LatestFilingRequest(EntityRequest):
    """Body of ``POST /v1/filings/latest``."""

    forms: list[str] | None = Field(default=None, examples=[["8-K"]])


class CompanyProfileRequest(EntityRequest):
    """Body of ``POST /v1/company/profile``."""


class InsiderTradesRequest(EntityRequest):
    """Body of ``POST /v1/filings/insider-trades``."""

    limit: int = Field(default=10, ge=1, le=50)


class StreamFilingsRequest(EntityRequest):
    """Body of ``POST /v1/filings/stream``."""

    forms: list[str] | None = Field(default=None, examples=[["8-K"]])
    poll_interval_s: float = Field(default=30.0, ge=5, le=300)
    max_events: int = Field(default=50, ge=1, le=200)


# --------------------------------------------------------------------------- #
# Responses                                                                    #
# --------------------------------------------------------------------------- #


class TickerToCikHTTP(BaseHTTPSchema):
    """Resolved ticker mapping."""

    ticker: str
    cik: str


class FilingHTTP(BaseHTTPSchema):
    """HTTP projection of one normalized filing."""

    accession_number: str
    filing_date: str
    form: str
    report_date: str | None = None
    acceptance_date_time: str | None = None
    act: str | None = None
    file_number: str | None = None
    film_number: str | None = None
    items: str | None = None
    size: int | None = None
    is_xbrl: int | None = None
    is_inline_xbrl: int | None = None
    primary_document: str | None = None
    primary_doc_description: str | None = None
    primary_doc_url: str | None = None

    @classmethod
    def from_record(cls, cik: str, record: FilingRecord) -> FilingHTTP:
        """Build the projection, deriving the primary document URL."""
        return cls(**record.to_dict(), primary_doc_url=primary_doc_url_for(cik, record))


class FilingsListHTTP(BaseHTTPSchema):
    """Recent filings of one entity."""

    cik: str
    name: str | None = None
    tickers: list[str] = Field(default_factory=list)
    filings: list[FilingHTTP] = Field(default_factory=list)


class LatestFilingHTTP(BaseHTTPSchema):
    """Most recent matching filing of one entity, if any."""

    cik: str
    name: str | None = None
    tickers: list[str] = Field(default_factory=list)
    filing: FilingHTTP | None = None


class CompanyProfileHTTP(BaseHTTPSchema):
    """Entity profile as reported by the submissions document."""

    cik: str
    name: str | None = None
    tickers: list[str] = Field(default_factory=list)
    sic_description: str | None = None
    category: str | None = None
    entity_type: str | None = None
    fiscal_year_end: str | None = None
    state_of_incorporation: str | None = None
    phone: str | None = None
    website: str | None = None
    addresses: dict[str, Any] = Field(default_factory=dict)
    former_names: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, cik: str, snapshot: SubmissionsSnapshot) -> CompanyProfileHTTP:
        """Build the profile from a snapshot, keyed by the canonical CIK."""
        return cls(
            cik=cik,
            name=snapshot.name,
            tickers=list(snapshot.tickers),
            sic_description=snapshot.sic_description,
            category=snapshot.category,
            entity_type=snapshot.entity_type,
            fiscal_year_end=snapshot.fiscal_year_end,
            state_of_incorporation=snapshot.state_of_incorporation,
            phone=snapshot.phone,
            website=snapshot.website,
            addresses=dict(snapshot.addresses),
            former_names=[dict(n) for n in snapshot.former_names],
        )


class InsiderTradesHTTP(BaseHTTPSchema):
    """Recent insider ownership filings (forms 3, 4, 5)."""

    ticker: str | None = None
    cik: str
    name: str | None = None
    trades: list[FilingHTTP] = Field(default_factory=list)


class HealthHTTP(BaseHTTPSchema):
    """Liveness payload."""

    status: str = "ok"
    agent: str
    version: str
