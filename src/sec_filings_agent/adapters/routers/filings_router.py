# src/sec_filings_agent/adapters/routers/filings_router.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Filings Router (v1).

Synopsis:
    HTTP surface over ``FilingsService``.

Endpoints (all under /v1):
    - POST /v1/mappings/ticker-to-cik → ticker and canonical CIK.
    - POST /v1/filings/recent → recent filings, most recent first.
    - POST /v1/filings/latest → most recent matching filing or null.
    - POST /v1/company/profile → entity profile.
    - POST /v1/filings/insider-trades → recent forms 3, 4 and 5.
    - POST /v1/filings/stream → NDJSON change stream ending in a summary.

Design:
    * Bodies are validated by the HTTP schemas; domain errors propagate to
      the envelope handlers in ``infrastructure.http.errors``.
    * The stream is validated and its entity resolved before the response
      starts, so those errors still map to an HTTP status. Once streaming,
      failures arrive as ``error`` lines.
    * A client disconnect ends the body iteration, which sets the stream's
      cancellation token.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import AsyncIterator
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from sec_filings_agent.adapters.schemas.http import (
    CompanyProfileHTTP,
    CompanyProfileRequest,
    EntityRequest,
    ErrorEnvelope,
    FilingHTTP,
    FilingsListHTTP,
    InsiderTradesHTTP,
    InsiderTradesRequest,
    LatestFilingHTTP,
    LatestFilingRequest,
    RecentFilingsRequest,
    StreamFilingsRequest,
    TickerToCikHTTP,
    TickerToCikRequest,
)
from sec_filings_agent.application.services.filings_service import FilingsService
from sec_filings_agent.dependencies.edgar import get_filings_service
from sec_filings_agent.domain.entities.stream_events import StreamItem
from sec_filings_agent.domain.services.filing_normalizer import INSIDER_FORMS
from sec_filings_agent.infrastructure.logging.logger import get_json_logger, set_log_context

logger = get_json_logger(__name__)

router = APIRouter(prefix="/v1", tags=["SEC Filings"])

Service = Annotated[FilingsService, Depends(get_filings_service)]

NDJSON_MEDIA_TYPE = "application/x-ndjson"

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope, "description": "Invalid identifier or parameters."},
    404: {"model": ErrorEnvelope, "description": "Unknown ticker."},
    500: {"model": ErrorEnvelope, "description": "Missing SEC user agent."},
    502: {"model": ErrorEnvelope, "description": "EDGAR rejected the request or sent bad data."},
    503: {"model": ErrorEnvelope, "description": "EDGAR unavailable after retries."},
}


async def _resolve(service: FilingsService, body: EntityRequest) -> str:
    return await service.resolve_identifier(ticker=body.ticker, cik=body.cik)


@router.post(
    "/mappings/ticker-to-cik",
    response_model=TickerToCikHTTP,
    responses=_ERROR_RESPONSES,
    summary="Resolve a ticker symbol to its CIK",
    operation_id="ticker_to_cik",
)
async def ticker_to_cik(body: TickerToCikRequest, service: Service) -> TickerToCikHTTP:
    cik = await service.resolve_entity(body.ticker)
    return TickerToCikHTTP(ticker=body.ticker.upper(), cik=cik)


@router.post(
    "/filings/recent",
    response_model=FilingsListHTTP,
    responses=_ERROR_RESPONSES,
    summary="List recent filings (most recent first)",
    operation_id="list_recent_filings",
)
async def list_recent_filings(body: RecentFilingsRequest, service: Service) -> FilingsListHTTP:
    cik = await _resolve(service, body)
    snapshot, filings = await service.list_filings_with_snapshot(
        cik, forms=body.forms, limit=body.limit
    )
    return FilingsListHTTP(
        cik=cik,
        name=snapshot.name,
        tickers=list(snapshot.tickers),
        filings=[FilingHTTP.from_record(cik, f) for f in filings],
    )


@router.post(
    "/filings/latest",
    response_model=LatestFilingHTTP,
    responses=_ERROR_RESPONSES,
    summary="Get the most recent matching filing",
    operation_id="get_latest_filing",
)
async def get_latest_filing(body: LatestFilingRequest, service: Service) -> LatestFilingHTTP:
    cik = await _resolve(service, body)
    snapshot, matches = await service.list_filings_with_snapshot(cik, forms=body.forms, limit=1)
    latest = matches[0] if matches else None
    return LatestFilingHTTP(
        cik=cik,
        name=snapshot.name,
        tickers=list(snapshot.tickers),
        filing=FilingHTTP.from_record(cik, latest) if latest is not None else None,
    )


@router.post(
    "/company/profile",
    response_model=CompanyProfileHTTP,
    responses=_ERROR_RESPONSES,
    summary="Get the company profile",
    operation_id="get_company_profile",
)
async def get_company_profile(body: CompanyProfileRequest, service: Service) -> CompanyProfileHTTP:
    cik = await _resolve(service, body)
    snapshot = await service.get_company_profile(cik)
    return CompanyProfileHTTP.from_snapshot(cik, snapshot)


@router.post(
    "/filings/insider-trades",
    response_model=InsiderTradesHTTP,
    responses=_ERROR_RESPONSES,
    summary="List recent insider ownership filings (forms 3, 4, 5)",
    operation_id="list_insider_trades",
)
async def list_insider_trades(body: InsiderTradesRequest, service: Service) -> InsiderTradesHTTP:
    cik = await _resolve(service, body)
    snapshot, trades = await service.list_filings_with_snapshot(
        cik, forms=INSIDER_FORMS, limit=body.limit
    )
    return InsiderTradesHTTP(
        ticker=body.ticker.upper() if body.ticker else None,
        cik=cik,
        name=snapshot.name,
        trades=[FilingHTTP.from_record(cik, t) for t in trades],
    )


@router.post(
    "/filings/stream",
    responses={
        200: {
            "content": {NDJSON_MEDIA_TYPE: {}},
            "description": "One JSON object per line: filing/error events, then a summary.",
        },
        **_ERROR_RESPONSES,
    },
    summary="Stream filing changes as NDJSON",
    operation_id="stream_filing_changes",
)
async def stream_filing_changes(body: StreamFilingsRequest, service: Service) -> StreamingResponse:
    cik = await _resolve(service, body)
    cancel = asyncio.Event()
    items = service.subscribe_to_changes(
        cik,
        forms=body.forms,
        poll_interval_s=body.poll_interval_s,
        max_events=body.max_events,
        cancel=cancel,
    )
    return StreamingResponse(
        _ndjson(items, cancel, stream_id=uuid.uuid4().hex),
        media_type=NDJSON_MEDIA_TYPE,
    )


async def _ndjson(
    items: AsyncIterator[StreamItem],
    cancel: asyncio.Event,
    *,
    stream_id: str,
) -> AsyncIterator[str]:
    set_log_context(stream_id=stream_id)
    try:
        async for item in items:
            yield json.dumps(item.to_dict(), separators=(",", ":"), default=str) + "\n"
    finally:
        cancel.set()
