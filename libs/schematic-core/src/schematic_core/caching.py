"""Single-flight asynchronous memoization."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from functools import partial
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")
O = TypeVar("O")  # noqa: E741


class AsyncCache(Generic[K, V, O]):
    """Memoizes an async loader so each key is computed at most once.

    The first request for a key schedules the loader as a task; every request
    for the same key, concurrent or later, awaits that task. Callers await
    through :func:`asyncio.shield` and are counted while they wait. A
    cancelled caller leaves the computation running for the others, but when
    the last waiter is cancelled the computation is cancelled too, its entry
    is evicted and the next request starts over. Failures are cached like
    results: all callers see the same exception.

    *owner* is handed to the loader on every call so loaders can recurse into
    sibling caches (e.g. a primary key loader asking for the table's columns).
    """

    def __init__(
        self,
        loader: Callable[[K, O], Awaitable[V]],
        *,
        key_func: Callable[[K], Hashable] | None = None,
        name: str = "cache",
    ) -> None:
        self._loader = loader
        self._key_func: Callable[[K], Hashable] = key_func or (lambda key: key)  # type: ignore[assignment,return-value]
        self._tasks: dict[Hashable, asyncio.Task[V]] = {}
        self._waiters: dict[asyncio.Task[V], int] = {}
        self.name = name
        self.computations = 0

    async def get(self, key: K, owner: O) -> V:
        if key is None:
            raise ValueError(f"{self.name}: cache key must not be None.")

        cache_key = self._key_func(key)
        task = self._tasks.get(cache_key)
        if task is None or task.cancelled() or task.cancelling():
            logger.debug("%s miss for %s", self.name, key)
            task = asyncio.ensure_future(self._loader(key, owner))
            task.add_done_callback(partial(self._evict_cancelled, cache_key))
            self._tasks[cache_key] = task
            self.computations += 1
        else:
            logger.debug("%s hit for %s", self.name, key)

        self._waiters[task] = self._waiters.get(task, 0) + 1
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if self._waiters[task] == 1 and not task.done():
                logger.debug("%s cancelling computation for %s", self.name, key)
                task.cancel()
            raise
        finally:
            remaining = self._waiters[task] - 1
            if remaining:
                self._waiters[task] = remaining
            else:
                del self._waiters[task]

    def _evict_cancelled(self, cache_key: Hashable, task: asyncio.Task[V]) -> None:
        if task.cancelled() and self._tasks.get(cache_key) is task:
            del self._tasks[cache_key]

    def __contains__(self, key: object) -> bool:
        task = self._tasks.get(self._key_func(key))  # type: ignore[arg-type]
        return task is not None and not task.cancelled()

    def __len__(self) -> int:
        return len(self._tasks)
