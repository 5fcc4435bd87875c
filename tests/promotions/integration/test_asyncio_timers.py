"""Tests for the asyncio timer adapter on a real event loop."""

import asyncio

from storefront.promotions.adapters import AsyncioTimerBackend


def test_repeating_timer_fires_until_cancelled():
    calls = []

    async def scenario():
        backend = AsyncioTimerBackend()
        handle = backend.schedule_repeating(0.01, 0.02, lambda: calls.append(1))
        await asyncio.sleep(0.1)
        handle.cancel()
        fired = len(calls)
        await asyncio.sleep(0.05)
        return handle, fired

    handle, fired = asyncio.run(scenario())

    assert fired >= 2
    assert len(calls) == fired
    assert handle.active is False


def test_failing_callback_keeps_the_timer_alive():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    async def scenario():
        backend = AsyncioTimerBackend()
        handle = backend.schedule_repeating(0, 0.01, flaky)
        await asyncio.sleep(0.08)
        handle.cancel()

    asyncio.run(scenario())

    assert len(calls) >= 2
