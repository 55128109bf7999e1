# tests/integration/routers/test_filings_router.py
from __future__ import annotations

import asyncio
import json
from collections.abc import Iterator

import httpx
import pytest
import respx
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sec_filings_agent.application.services.filings_service import FilingsService
from sec_filings_agent.dependencies.edgar import get_filings_service
from sec_filings_agent.infrastructure.external_apis.edgar.client import EdgarFetcher
from sec_filings_agent.infrastructure.external_apis.edgar.settings import EdgarSettings
from sec_filings_agent.main import create_app
from tests.fixtures.edgar_payloads import TICKERS_URL, submissions_doc, submissions_url, ticker_table

pytestmark = pytest.mark.integration

URL = submissions_url("0000320193")
TABLE = ticker_table([(320193, "AAPL", "Apple Inc.")])
DOC = submissions_doc(
    filings=[
        ("0000320193-24-000003", "2024-03-01", "4", "form4.xml"),
        ("0000320193-24-000002", "2024-02-01", "8-K", "b.htm"),
        ("0000320193-24-000001", "2024-01-01", "10-K", "a.htm"),
    ],
    sicDescription="Electronic Computers",
    website="https://www.apple.com",
)


async def _cancel_after_first_wait(cancel: asyncio.Event, timeout: float) -> bool:
    cancel.set()
    return True


def _service(settings: EdgarSettings, recording_sleep) -> FilingsService:
    return FilingsService(
        EdgarFetcher(settings, sleep=recording_sleep),
        waiter=_cancel_after_first_wait,
    )


@pytest.fixture
def app(edgar_settings, recording_sleep) -> Iterator[FastAPI]:
    application = create_app()
    service = _service(edgar_settings, recording_sleep)
    application.dependency_overrides[get_filings_service] = lambda: service
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def _error(response: httpx.Response) -> dict:
    body = response.json()
    assert set(body) == {"error"}
    return body["error"]


def test_ticker_to_cik(client: TestClient) -> None:
    with respx.mock:
        respx.get(TICKERS_URL).mock(return_value=httpx.Response(200, json=TABLE))

        resp = client.post("/v1/mappings/ticker-to-cik", json={"ticker": "aapl"})

    assert resp.status_code == 200
    assert resp.json() == {"ticker": "AAPL", "cik": "320193"}


def test_unknown_ticker_maps_to_404(client: TestClient) -> None:
    with respx.mock:
        respx.get(TICKERS_URL).mock(return_value=httpx.Response(200, json=TABLE))

        resp = client.post("/v1/mappings/ticker-to-cik", json={"ticker": "ZZZZ"})

    assert resp.status_code == 404
    err = _error(resp)
    assert err["code"] == "UNKNOWN_TICKER"
    assert err["http_status"] == 404
    assert err["details"] == {"ticker": "ZZZZ"}


def test_recent_filings_by_ticker(client: TestClient) -> None:
    with respx.mock:
        respx.get(TICKERS_URL).mock(return_value=httpx.Response(200, json=TABLE))
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post("/v1/filings/recent", json={"ticker": "AAPL", "limit": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["cik"] == "320193"
    assert body["name"] == "Apple Inc."
    assert body["tickers"] == ["AAPL"]
    assert [f["accession_number"] for f in body["filings"]] == [
        "0000320193-24-000003",
        "0000320193-24-000002",
    ]
    assert body["filings"][1]["primary_doc_url"] == (
        "https://www.sec.gov/Archives/edgar/data/320193/000032019324000002/b.htm"
    )


def test_recent_filings_form_filter_by_cik(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post("/v1/filings/recent", json={"cik": "0000320193", "forms": ["10-k"]})

    assert resp.status_code == 200
    assert [f["form"] for f in resp.json()["filings"]] == ["10-K"]


def test_latest_filing(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        latest = client.post("/v1/filings/latest", json={"cik": 320193, "forms": ["8-K"]})
        missing = client.post("/v1/filings/latest", json={"cik": 320193, "forms": ["S-1"]})

    assert latest.status_code == 200
    assert latest.json()["filing"]["accession_number"] == "0000320193-24-000002"
    assert missing.status_code == 200
    assert missing.json()["filing"] is None


def test_company_profile(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post("/v1/company/profile", json={"cik": "320193"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["cik"] == "320193"
    assert body["sic_description"] == "Electronic Computers"
    assert body["website"] == "https://www.apple.com"


def test_insider_trades(client: TestClient) -> None:
    with respx.mock:
        respx.get(TICKERS_URL).mock(return_value=httpx.Response(200, json=TABLE))
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post("/v1/filings/insider-trades", json={"ticker": "aapl"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ticker"] == "AAPL"
    assert [t["form"] for t in body["trades"]] == ["4"]


def test_missing_identifier_is_a_422_envelope(client: TestClient) -> None:
    resp = client.post("/v1/filings/recent", json={"limit": 5})

    assert resp.status_code == 422
    assert _error(resp)["code"] == "VALIDATION_ERROR"


def test_limit_out_of_bounds_is_rejected(client: TestClient) -> None:
    resp = client.post("/v1/filings/recent", json={"cik": "320193", "limit": 51})

    assert resp.status_code == 422


def test_non_numeric_cik_is_a_400(client: TestClient) -> None:
    resp = client.post("/v1/company/profile", json={"cik": "apple"})

    assert resp.status_code == 400
    assert _error(resp)["code"] == "VALIDATION_ERROR"


def test_upstream_not_found_maps_to_502(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(404, text="not found"))

        resp = client.post("/v1/company/profile", json={"cik": "320193"})

    assert resp.status_code == 502
    err = _error(resp)
    assert err["code"] == "UPSTREAM_ERROR"
    assert err["details"]["status"] == 404


def test_upstream_unavailable_maps_to_503(client: TestClient, recording_sleep) -> None:
    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(503))

        resp = client.post("/v1/company/profile", json={"cik": "320193"})

    assert resp.status_code == 503
    assert _error(resp)["code"] == "UPSTREAM_UNAVAILABLE"
    assert route.call_count == 5
    assert len(recording_sleep.delays) == 4


def test_upstream_schema_error_maps_to_502(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, json={"name": "no cik"}))

        resp = client.post("/v1/company/profile", json={"cik": "320193"})

    assert resp.status_code == 502
    assert _error(resp)["code"] == "UPSTREAM_SCHEMA_ERROR"


def test_missing_user_agent_maps_to_500(app: FastAPI, recording_sleep) -> None:
    service = _service(EdgarSettings(user_agent=None), recording_sleep)
    app.dependency_overrides[get_filings_service] = lambda: service
    with TestClient(app) as client, respx.mock(assert_all_called=False) as respx_mock:
        route = respx_mock.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post("/v1/company/profile", json={"cik": "320193"})

    assert resp.status_code == 500
    assert _error(resp)["code"] == "CONFIGURATION_ERROR"
    assert not route.called


def test_stream_emits_ndjson_events_then_summary(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post(
            "/v1/filings/stream",
            json={"cik": "320193", "forms": ["8-K"], "poll_interval_s": 5, "max_events": 1},
        )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/x-ndjson")
    lines = [json.loads(line) for line in resp.text.splitlines() if line]
    assert [line["kind"] for line in lines] == ["filing", "summary"]
    assert lines[0]["filing"]["accession_number"] == "0000320193-24-000002"
    assert lines[0]["filing"]["primary_doc_url"].endswith("/000032019324000002/b.htm")
    assert lines[1] == {"kind": "summary", "status": "succeeded", "output": {"events_sent": 1}}


def test_stream_reports_poll_errors_inline(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(404, text="nope"))

        resp = client.post("/v1/filings/stream", json={"cik": "320193", "poll_interval_s": 5})

    assert resp.status_code == 200
    lines = [json.loads(line) for line in resp.text.splitlines() if line]
    assert lines[0]["kind"] == "error"
    assert lines[0]["code"] == "stream_poll_error"
    assert lines[0]["message"].startswith("SEC fetch failed 404")
    assert lines[-1] == {"kind": "summary", "status": "cancelled", "output": {"events_sent": 0}}


def test_stream_parameters_are_bounded(client: TestClient) -> None:
    too_fast = client.post("/v1/filings/stream", json={"cik": "320193", "poll_interval_s": 1})
    too_many = client.post("/v1/filings/stream", json={"cik": "320193", "max_events": 201})

    assert too_fast.status_code == 422
    assert too_many.status_code == 422


def test_request_id_is_echoed(client: TestClient) -> None:
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, json=DOC))

        resp = client.post(
            "/v1/company/profile",
            json={"cik": "320193"},
            headers={"x-request-id": "req-abc"},
        )

    assert resp.headers["x-request-id"] == "req-abc"
