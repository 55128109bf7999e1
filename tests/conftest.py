# tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import Iterator
from typing import Any

import pytest

from sec_filings_agent.infrastructure.external_apis.edgar.settings import EdgarSettings
from sec_filings_agent.infrastructure.logging.logger import clear_log_context
from tests.fixtures.edgar_payloads import DATA, TEST_USER_AGENT, WWW, FakeClock, RecordingSleep


@pytest.fixture
def edgar_settings() -> EdgarSettings:
    return EdgarSettings(user_agent=TEST_USER_AGENT, www_base_url=WWW, data_base_url=DATA)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def instant_waiter() -> Any:
    """Waiter that never sleeps; reports cancellation if already requested."""

    async def _wait(cancel: asyncio.Event, timeout: float) -> bool:
        await asyncio.sleep(0)
        return cancel.is_set()

    return _wait


@pytest.fixture(autouse=True)
def _reset_log_context() -> Iterator[None]:
    clear_log_context()
    yield
    clear_log_context()
