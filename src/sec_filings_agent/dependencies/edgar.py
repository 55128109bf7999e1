# src/sec_filings_agent/dependencies/edgar.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the EDGAR filings service.

Purpose:
    Provide FastAPI dependency hooks for the filings router. One
    ``FilingsService`` (and so one pair of caches and one HTTP client) is
    shared by every request and every change stream in the process.

Layer:
    dependencies

Notes:
    Tests override ``get_filings_service`` with a service built on a
    respx-mocked fetcher; ``get_filings_service.cache_clear()`` resets the
    process singleton.
"""

from __future__ import annotations

from functools import lru_cache

from sec_filings_agent.application.services.filings_service import FilingsService
from sec_filings_agent.infrastructure.external_apis.edgar.client import EdgarFetcher
from sec_filings_agent.infrastructure.external_apis.edgar.settings import EdgarSettings
from sec_filings_agent.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@lru_cache(maxsize=1)
def get_edgar_settings() -> EdgarSettings:
    """Return cached EDGAR settings loaded from the environment."""
    settings = EdgarSettings()
    logger.info(
        "EDGAR settings initialized",
        extra={
            "user_agent_set": bool(settings.user_agent),
            "www_base_url": settings.www_base_url,
            "data_base_url": settings.data_base_url,
            "timeout_s": settings.timeout_s,
            "max_retries": settings.max_retries,
        },
    )
    return settings


@lru_cache(maxsize=1)
def get_filings_service() -> FilingsService:
    """Return the process-wide filings service."""
    return FilingsService(EdgarFetcher(get_edgar_settings()))
