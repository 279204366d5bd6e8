"""Tests for the single-flight async cache."""

import asyncio

import pytest
from schematic_core.caching import AsyncCache


class _Owner:
    pass


async def test_concurrent_requests_share_one_computation():
    calls = 0
    release = asyncio.Event()

    async def loader(key, owner):
        nonlocal calls
        calls += 1
        await release.wait()
        return key * 2

    cache = AsyncCache(loader)
    waiters = [asyncio.ensure_future(cache.get(21, _Owner())) for _ in range(10)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*waiters)

    assert results == [42] * 10
    assert calls == 1
    assert cache.computations == 1


async def test_repeated_requests_reuse_completed_result():
    calls = 0

    async def loader(key, owner):
        nonlocal calls
        calls += 1
        return object()

    cache = AsyncCache(loader)
    first = await cache.get("a", None)
    second = await cache.get("a", None)

    assert first is second
    assert calls == 1
    assert "a" in cache
    assert len(cache) == 1


async def test_distinct_keys_compute_separately():
    async def loader(key, owner):
        return key.upper()

    cache = AsyncCache(loader)
    assert await asyncio.gather(cache.get("a", None), cache.get("b", None)) == ["A", "B"]
    assert cache.computations == 2


async def test_key_func_controls_equality():
    async def loader(key, owner):
        return key

    cache = AsyncCache(loader, key_func=str.casefold)
    first = await cache.get("Orders", None)
    second = await cache.get("ORDERS", None)

    assert first == second == "Orders"
    assert cache.computations == 1


async def test_failures_are_shared_by_all_callers():
    calls = 0

    async def loader(key, owner):
        nonlocal calls
        calls += 1
        await asyncio.sleep(0)
        raise RuntimeError("catalog unavailable")

    cache = AsyncCache(loader)
    results = await asyncio.gather(*(cache.get("k", None) for _ in range(5)), return_exceptions=True)

    assert all(isinstance(result, RuntimeError) for result in results)
    assert calls == 1
    with pytest.raises(RuntimeError, match="catalog unavailable"):
        await cache.get("k", None)
    assert calls == 1


async def test_cancelled_caller_does_not_cancel_shared_computation():
    release = asyncio.Event()

    async def loader(key, owner):
        await release.wait()
        return "done"

    cache = AsyncCache(loader)
    impatient = asyncio.ensure_future(cache.get("k", None))
    patient = asyncio.ensure_future(cache.get("k", None))
    await asyncio.sleep(0)
    impatient.cancel()
    release.set()

    assert await patient == "done"
    assert impatient.cancelled()
    assert cache.computations == 1


async def test_last_cancelled_caller_cancels_computation():
    started = asyncio.Event()
    loader_cancelled = False

    async def loader(key, owner):
        nonlocal loader_cancelled
        started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            loader_cancelled = True
            raise
        return "never"

    cache = AsyncCache(loader)
    first = asyncio.ensure_future(cache.get("k", None))
    second = asyncio.ensure_future(cache.get("k", None))
    await started.wait()

    first.cancel()
    await asyncio.sleep(0)
    assert not loader_cancelled

    second.cancel()
    for waiter in (first, second):
        with pytest.raises(asyncio.CancelledError):
            await waiter
    await asyncio.sleep(0)

    assert loader_cancelled
    assert "k" not in cache
    assert len(cache) == 0


async def test_cancelled_computation_is_evicted_and_recomputed():
    calls = 0
    started = asyncio.Event()

    async def loader(key, owner):
        nonlocal calls
        calls += 1
        if calls == 1:
            started.set()
            await asyncio.sleep(3600)
        return calls

    cache = AsyncCache(loader)
    waiter = asyncio.ensure_future(cache.get("k", None))
    await started.wait()

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter
    await asyncio.sleep(0)

    assert "k" not in cache
    assert await cache.get("k", None) == 2
    assert cache.computations == 2


async def test_owner_is_passed_to_loader():
    seen = []

    async def loader(key, owner):
        seen.append(owner)
        return key

    owner = _Owner()
    cache = AsyncCache(loader)
    await cache.get("k", owner)
    assert seen == [owner]


async def test_none_key_rejected():
    async def loader(key, owner):
        return key

    cache = AsyncCache(loader, name="columns")
    with pytest.raises(ValueError, match="columns"):
        await cache.get(None, None)
