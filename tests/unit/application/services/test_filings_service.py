# tests/unit/application/services/test_filings_service.py
from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from sec_filings_agent.application.services.filings_service import FilingsService
from sec_filings_agent.domain.entities.stream_events import (
    FilingEvent,
    StreamStatus,
    StreamSummary,
)
from sec_filings_agent.domain.exceptions.edgar import (
    EdgarValidationError,
    PermanentUpstreamError,
    UnknownTicker,
)
from sec_filings_agent.infrastructure.external_apis.edgar.client import EdgarFetcher
from tests.fixtures.edgar_payloads import TICKERS_URL, submissions_doc, submissions_url, ticker_table

URL = submissions_url("0000320193")
TABLE = ticker_table([(320193, "AAPL", "Apple Inc.")])
DOC = submissions_doc(
    filings=[
        ("0000320193-24-000005", "2024-05-01", "4", "xslF345X05/form4.xml"),
        ("0000320193-24-000004", "2024-04-01", "8-K", "e.htm"),
        ("0000320193-24-000003", "2024-03-01", "10-Q", "d.htm"),
        ("0000320193-24-000002", "2024-02-01", "3", "form3.xml"),
        ("0000320193-24-000001", "2024-01-01", "10-K", "a.htm"),
    ],
    sicDescription="Electronic Computers",
)


@pytest.mark.asyncio
async def test_resolve_identifier_prefers_cik_then_ticker(edgar_settings) -> None:
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http))
        with respx.mock:
            route = respx.get(TICKERS_URL).mock(return_value=httpx.Response(200, json=TABLE))

            assert await service.resolve_identifier(cik="0000789019", ticker="AAPL") == "789019"
            assert not route.called
            assert await service.resolve_identifier(ticker="aapl") == "320193"
            assert await service.resolve_entity("AAPL") == "320193"

            with pytest.raises(UnknownTicker):
                await service.resolve_identifier(ticker="NOPE")
            with pytest.raises(EdgarValidationError):
                await service.resolve_identifier()

    assert route.call_count == 1


@pytest.mark.asyncio
async def test_list_filings_filters_and_limits_most_recent_first(edgar_settings) -> None:
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http))
        with respx.mock:
            route = respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

            everything = await service.list_filings("320193")
            periodic = await service.list_filings("320193", forms=["10-K", "10-q"])
            top_two = await service.list_filings("320193", limit=2)

    assert route.call_count == 1
    assert len(everything) == 5
    assert [f.form for f in periodic] == ["10-Q", "10-K"]
    assert [f.accession_number for f in top_two] == [
        "0000320193-24-000005",
        "0000320193-24-000004",
    ]


@pytest.mark.asyncio
async def test_list_filings_rejects_non_positive_limit(edgar_settings) -> None:
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http))

        with pytest.raises(EdgarValidationError):
            await service.list_filings("320193", limit=0)


@pytest.mark.asyncio
async def test_list_filings_surfaces_ordering_violation(edgar_settings) -> None:
    unordered = submissions_doc(
        filings=[
            ("0000320193-24-000001", "2024-01-01", "10-K", "a.htm"),
            ("0000320193-24-000002", "2024-02-01", "8-K", "b.htm"),
        ]
    )
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http))
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(200, json=unordered))

            with pytest.raises(PermanentUpstreamError):
                await service.list_filings("320193")


@pytest.mark.asyncio
async def test_list_filings_accepts_after_hours_filing_dated_next_day(edgar_settings) -> None:
    """A 10-Q accepted at 18:00 is dated the next day; a Form 4 at 19:00 is not."""
    window = submissions_doc(
        filings=[
            ("0000320193-24-000002", "2024-05-01", "4", "form4.xml"),
            ("0000320193-24-000001", "2024-05-02", "10-Q", "q.htm"),
        ],
        acceptance=["2024-05-01T19:00:00.000Z", "2024-05-01T18:00:00.000Z"],
    )
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http))
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(200, json=window))

            records = await service.list_filings("320193")
            latest = await service.get_latest_filing("320193")

    assert [r.form for r in records] == ["4", "10-Q"]
    assert latest is not None and latest.accession_number == "0000320193-24-000002"


@pytest.mark.asyncio
async def test_latest_profile_and_insider_trades(edgar_settings) -> None:
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http))
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

            latest = await service.get_latest_filing("320193")
            latest_8k = await service.get_latest_filing("320193", forms=["8-K"])
            none = await service.get_latest_filing("320193", forms=["S-1"])
            profile = await service.get_company_profile("320193")
            trades = await service.list_insider_trades("320193", limit=10)

    assert latest is not None and latest.form == "4"
    assert latest_8k is not None and latest_8k.accession_number == "0000320193-24-000004"
    assert none is None
    assert profile.name == "Apple Inc."
    assert profile.sic_description == "Electronic Computers"
    assert [t.form for t in trades] == ["4", "3"]


@pytest.mark.asyncio
async def test_change_stream_over_live_cache(edgar_settings, fake_clock) -> None:
    """Upstream moves A → B → C; with max_events=2 the stream emits A and B."""
    a = submissions_doc(filings=[("0000320193-24-000001", "2024-01-01", "10-K", "a.htm")])
    b = submissions_doc(
        filings=[
            ("0000320193-24-000002", "2024-02-01", "8-K", "b.htm"),
            ("0000320193-24-000001", "2024-01-01", "10-K", "a.htm"),
        ]
    )
    c = submissions_doc(
        filings=[
            ("0000320193-24-000003", "2024-03-01", "8-K", "c.htm"),
            ("0000320193-24-000002", "2024-02-01", "8-K", "b.htm"),
            ("0000320193-24-000001", "2024-01-01", "10-K", "a.htm"),
        ]
    )

    async def advancing_waiter(cancel: asyncio.Event, timeout: float) -> bool:
        fake_clock.advance(timeout)
        return cancel.is_set()

    async with httpx.AsyncClient() as http:
        service = FilingsService(
            EdgarFetcher(edgar_settings, http=http),
            waiter=advancing_waiter,
            clock=fake_clock,
        )
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.get(URL).mock(
                side_effect=[
                    httpx.Response(200, json=a),
                    httpx.Response(200, json=b),
                    httpx.Response(200, json=c),
                ]
            )

            items = [
                item
                async for item in service.subscribe_to_changes(
                    "0000320193", poll_interval_s=5, max_events=2
                )
            ]

    events = [i for i in items if isinstance(i, FilingEvent)]
    assert [e.filing.accession_number for e in events] == [
        "0000320193-24-000001",
        "0000320193-24-000002",
    ]
    assert events[1].primary_doc_url == (
        "https://www.sec.gov/Archives/edgar/data/320193/000032019324000002/b.htm"
    )
    assert items[-1] == StreamSummary(status=StreamStatus.SUCCEEDED, emitted_count=2)
    assert route.call_count == 2


def test_subscribe_validates_before_streaming(edgar_settings) -> None:
    service = FilingsService(EdgarFetcher(edgar_settings))

    with pytest.raises(EdgarValidationError):
        service.subscribe_to_changes("320193", poll_interval_s=1)
    with pytest.raises(EdgarValidationError):
        service.subscribe_to_changes("320193", max_events=500)


class _ExpiringClock:
    """Clock that jumps past any TTL on every read."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 3600.0
        return self.now


@pytest.mark.asyncio
async def test_records_and_entity_fields_come_from_one_snapshot(edgar_settings) -> None:
    old = submissions_doc(
        name="Old Name Inc.",
        filings=[("0000320193-24-000001", "2024-01-01", "10-K", "a.htm")],
    )
    new = submissions_doc(
        name="New Name Inc.",
        filings=[("0000320193-24-000002", "2024-02-01", "8-K", "b.htm")],
    )
    async with httpx.AsyncClient() as http:
        service = FilingsService(EdgarFetcher(edgar_settings, http=http), clock=_ExpiringClock())
        with respx.mock:
            route = respx.get(URL).mock(
                side_effect=[httpx.Response(200, json=old), httpx.Response(200, json=new)]
            )

            snapshot, records = await service.list_filings_with_snapshot("320193", limit=1)

    assert route.call_count == 1
    assert snapshot.name == "Old Name Inc."
    assert [r.accession_number for r in records] == ["0000320193-24-000001"]
