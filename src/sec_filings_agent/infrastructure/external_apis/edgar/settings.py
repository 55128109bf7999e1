# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR transport client settings.

Purpose:
    Provide Pydantic-based configuration for the EDGAR HTTP fetcher and the
    read-through caches built on it: base URLs, identifying user agent,
    timeouts, retry schedule and cache TTLs.

Layer:
    infrastructure

Notes:
    - Values are sourced from environment variables prefixed with ``EDGAR_``.
      The user agent is also accepted as ``SEC_USER_AGENT``.
    - The user agent is *not* validated here. A missing or short value is a
      precondition failure raised by the fetcher before any request, so the
      process can still boot and serve non-EDGAR routes.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EdgarSettings(BaseSettings):
    """Configuration for the EDGAR HTTP fetcher and caches.

    Environment variables (with ``model_config.env_prefix``):

    * ``EDGAR_USER_AGENT`` (or ``SEC_USER_AGENT``)
    * ``EDGAR_WWW_BASE_URL``
    * ``EDGAR_DATA_BASE_URL``
    * ``EDGAR_TIMEOUT_S``
    * ``EDGAR_MAX_RETRIES``
    * ``EDGAR_BASE_BACKOFF_S``
    * ``EDGAR_MAX_JITTER_S``
    * ``EDGAR_SUBMISSIONS_TTL_S``
    * ``EDGAR_STREAM_TTL_S``
    """

    user_agent: str | None = Field(
        None,
        validation_alias=AliasChoices("EDGAR_USER_AGENT", "SEC_USER_AGENT"),
        description=(
            "Identifying User-Agent sent to EDGAR, e.g. "
            '"sec-filings-agent/0.1 (you@example.com)". Required by the SEC.'
        ),
    )
    www_base_url: str = Field(
        "https://www.sec.gov",
        description="Base URL for www.sec.gov (ticker table, archives).",
    )
    data_base_url: str = Field(
        "https://data.sec.gov",
        description="Base URL for the data.sec.gov submissions API.",
    )
    timeout_s: float = Field(
        8.0,
        gt=0,
        description="Per-attempt timeout in seconds.",
    )
    max_retries: int = Field(
        4,
        ge=0,
        le=10,
        description="Retries after the first attempt for transient failures.",
    )
    base_backoff_s: float = Field(
        0.35,
        ge=0,
        description="Base of the exponential backoff (doubles per attempt).",
    )
    max_jitter_s: float = Field(
        0.15,
        ge=0,
        description="Exclusive upper bound of uniform jitter added to each backoff.",
    )
    submissions_ttl_s: float = Field(
        30.0,
        gt=0,
        description="Default freshness window for point-in-time submissions lookups.",
    )
    stream_ttl_s: float = Field(
        5.0,
        gt=0,
        description="Freshness window used by change-stream polls.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="EDGAR_",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def company_tickers_url(self) -> str:
        """URL of the bulk ticker → CIK table."""
        return f"{self.www_base_url.rstrip('/')}/files/company_tickers.json"

    def submissions_url(self, padded_cik: str) -> str:
        """URL of the submissions document for a 10-digit padded CIK."""
        return f"{self.data_base_url.rstrip('/')}/submissions/CIK{padded_cik}.json"
