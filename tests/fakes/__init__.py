"""Shared test doubles — re-export memory backends."""

from __future__ import annotations

import asyncio
from typing import Any

from tenantforms.persistence.memory_backend import MemoryCacheBackend, MemoryDataSource


class GatedDataSource(MemoryDataSource):
    """MemoryDataSource whose fetch_list waits until ``release()`` is called."""

    def __init__(self, lists: dict[str, Any] | None = None) -> None:
        super().__init__(lists)
        self.gate = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def fetch_list(self, kind: str, params: dict[str, Any] | None = None) -> Any:
        await self.gate.wait()
        return await super().fetch_list(kind, params)


__all__ = ["GatedDataSource", "MemoryCacheBackend", "MemoryDataSource"]
