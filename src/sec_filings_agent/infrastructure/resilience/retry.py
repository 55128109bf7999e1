# src/sec_filings_agent/infrastructure/resilience/retry.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Retry utilities (async) with jittered exponential backoff."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts."""

    total: int = 4  # number of retries (not counting the first attempt)
    base: float = 0.35  # base backoff seconds, doubled per attempt
    jitter: float = 0.15  # upper bound (exclusive) of additive uniform jitter

    def backoff(self, attempt: int) -> float:
        """Return the wait before retry number ``attempt + 1``.

        Args:
            attempt: Zero-based index of the attempt that just failed.

        Returns:
            ``base * 2**attempt`` plus uniform jitter in ``[0, jitter)``.
        """
        return self.base * (2**attempt) + random.random() * self.jitter  # noqa: S311


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: Callable[[Exception | T], bool],
    delay_hint: Callable[[T], float | None] | None = None,
    on_retry: Callable[[int, Exception | T, float], None] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Retry an async function with backoff until success or budget exhausted.

    Results and exceptions are both passed to ``retry_on``. When the budget
    is exhausted the last *result* is returned as-is, while the last
    *exception* is re-raised.

    Args:
        fn: Zero-arg async function to execute.
        policy: RetryPolicy defining count/backoff.
        retry_on: Predicate that returns True when we should retry.
        delay_hint: Optional upstream-provided minimum wait for a result
            (e.g., ``Retry-After``); the larger of hint and backoff wins.
        on_retry: Optional observer called as ``(attempt, outcome, delay)``
            before each sleep.
        sleep: Awaitable sleep function (injectable for tests).

    Returns:
        The return value of ``fn``.

    Raises:
        The last exception if retries are exhausted or it is not retryable.
    """
    attempt = 0
    while True:
        outcome: Exception | T
        try:
            result = await fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= policy.total or not retry_on(exc):
                raise
            outcome = exc
            delay = policy.backoff(attempt)
        else:
            if attempt >= policy.total or not retry_on(result):
                return result
            outcome = result
            delay = policy.backoff(attempt)
            hint = delay_hint(result) if delay_hint is not None else None
            if hint is not None:
                delay = max(hint, delay)

        if on_retry is not None:
            on_retry(attempt, outcome, delay)
        await sleep(delay)
        attempt += 1
