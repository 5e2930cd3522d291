"""Tests for ScreenLifetime liveness guarding."""

from __future__ import annotations

import asyncio

import pytest

from tenantforms.core.lifecycle import ScreenLifetime


async def _value(result):
    return result


async def test_guard_returns_result_while_alive():
    lifetime = ScreenLifetime()
    assert await lifetime.guard(_value(42)) == 42


async def test_guard_drops_result_after_close():
    lifetime = ScreenLifetime("item form")
    gate = asyncio.Event()

    async def slow():
        await gate.wait()
        return "late"

    pending = asyncio.create_task(lifetime.guard(slow()))
    await asyncio.sleep(0)
    lifetime.close()
    gate.set()
    assert await pending is None
    assert lifetime.alive is False


async def test_guard_propagates_errors():
    async def boom():
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        await ScreenLifetime().guard(boom())
