# src/sec_filings_agent/infrastructure/caching/singleflight.py
# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""Single-flight de-duplication for concurrent loads (in-process).

Synopsis:
    Collapse concurrent calls for the same key into one underlying
    operation. The first caller starts the load as a task and registers it in
    a lock-guarded in-flight map; later callers await the same task until it
    completes. Completed loads leave the map, so the next call after a failure
    starts a fresh load.

Design:
    * The load runs as its own task and callers await it through
      ``asyncio.shield``: a cancelled caller never cancels the shared load.
    * Results are not retained here; callers own their caches.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Generic, TypeVar

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Lock-guarded map of in-flight loads keyed by cache key."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._inflight: dict[str, asyncio.Task[T]] = {}

    def in_flight(self, key: str) -> bool:
        """Return True while a load for ``key`` is outstanding."""
        return key in self._inflight

    async def do(self, key: str, loader: Callable[[], Awaitable[T]]) -> T:
        """Run ``loader`` for ``key`` unless a load is already in flight.

        Args:
            key: Cache key identifying the load.
            loader: Zero-arg coroutine function performing the load.

        Returns:
            The load's result, shared by every concurrent caller.

        Raises:
            Whatever the load raised, to every caller awaiting it.
        """
        async with self._lock:
            task = self._inflight.get(key)
            if task is None:
                task = asyncio.ensure_future(loader())
                self._inflight[key] = task
                task.add_done_callback(partial(self._forget, key))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[T]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # Callers re-raise it; mark it retrieved so the loop does not warn.
            task.exception()
