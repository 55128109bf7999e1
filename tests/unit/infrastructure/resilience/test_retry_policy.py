# tests/unit/infrastructure/resilience/test_retry_policy.py
from __future__ import annotations

import pytest

from sec_filings_agent.infrastructure.resilience.retry import RetryPolicy, retry_async


def test_backoff_doubles_with_bounded_jitter() -> None:
    policy = RetryPolicy(total=4, base=0.35, jitter=0.15)

    for attempt in range(4):
        delay = policy.backoff(attempt)
        floor = 0.35 * (2**attempt)
        assert floor <= delay < floor + 0.15


@pytest.mark.asyncio
async def test_retry_returns_first_acceptable_result(recording_sleep) -> None:
    results = iter([503, 503, 200])

    async def call() -> int:
        return next(results)

    out = await retry_async(
        call,
        policy=RetryPolicy(total=4),
        retry_on=lambda r: r == 503,
        sleep=recording_sleep,
    )

    assert out == 200
    assert len(recording_sleep.delays) == 2


@pytest.mark.asyncio
async def test_retry_returns_last_result_when_budget_spent(recording_sleep) -> None:
    calls = 0

    async def call() -> int:
        nonlocal calls
        calls += 1
        return 503

    out = await retry_async(
        call,
        policy=RetryPolicy(total=2),
        retry_on=lambda r: r == 503,
        sleep=recording_sleep,
    )

    assert out == 503
    assert calls == 3
    assert len(recording_sleep.delays) == 2


@pytest.mark.asyncio
async def test_retry_reraises_last_exception(recording_sleep) -> None:
    calls = 0

    async def call() -> int:
        nonlocal calls
        calls += 1
        raise ConnectionError(f"boom {calls}")

    with pytest.raises(ConnectionError, match="boom 3"):
        await retry_async(
            call,
            policy=RetryPolicy(total=2),
            retry_on=lambda o: isinstance(o, ConnectionError),
            sleep=recording_sleep,
        )


@pytest.mark.asyncio
async def test_non_retryable_exception_is_raised_immediately(recording_sleep) -> None:
    async def call() -> int:
        raise ValueError("nope")

    with pytest.raises(ValueError):
        await retry_async(
            call,
            policy=RetryPolicy(total=4),
            retry_on=lambda o: isinstance(o, ConnectionError),
            sleep=recording_sleep,
        )
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_delay_hint_wins_when_larger(recording_sleep) -> None:
    results = iter([429, 200])
    seen: list[tuple[int, float]] = []

    async def call() -> int:
        return next(results)

    await retry_async(
        call,
        policy=RetryPolicy(total=4, base=0.35, jitter=0.15),
        retry_on=lambda r: r == 429,
        delay_hint=lambda r: 7.0,
        on_retry=lambda attempt, outcome, delay: seen.append((attempt, delay)),
        sleep=recording_sleep,
    )

    assert recording_sleep.delays == [7.0]
    assert seen == [(0, 7.0)]
