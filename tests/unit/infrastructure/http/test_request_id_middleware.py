# tests/unit/infrastructure/http/test_request_id_middleware.py
from __future__ import annotations

import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sec_filings_agent.infrastructure.http.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
    _sanitize_inbound,
)
from sec_filings_agent.infrastructure.logging.logger import get_request_id


@pytest.mark.parametrize(
    "raw",
    ["req-123", "svc:abc.def_1", "user@host", " padded ", "a" * 128],
)
def test_safe_ids_are_kept(raw: str) -> None:
    assert _sanitize_inbound(raw) == raw.strip()


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "a" * 129, "has space", "<script>", "id;drop", "tab\tid", "ümlaut"],
)
def test_unsafe_ids_are_rejected(raw: str | None) -> None:
    assert _sanitize_inbound(raw) is None


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    async def echo() -> dict[str, str | None]:
        return {"request_id": get_request_id()}

    return app


def test_unsafe_inbound_id_is_replaced_with_uuid() -> None:
    with TestClient(_app()) as client:
        resp = client.get("/echo", headers={REQUEST_ID_HEADER: "evil<script>"})

    echoed = resp.headers[REQUEST_ID_HEADER]
    assert echoed != "evil<script>"
    assert str(uuid.UUID(echoed)) == echoed
    assert resp.json() == {"request_id": echoed}


def test_safe_inbound_id_is_echoed_and_bound_to_logs() -> None:
    with TestClient(_app()) as client:
        resp = client.get("/echo", headers={REQUEST_ID_HEADER: "req-abc:1"})

    assert resp.headers[REQUEST_ID_HEADER] == "req-abc:1"
    assert resp.json() == {"request_id": "req-abc:1"}
