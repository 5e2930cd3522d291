"""ScreenLifetime — liveness guard for async fetches started by a screen."""

from __future__ import annotations

import logging
from typing import Awaitable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScreenLifetime:
    """Alive from construction until ``close()``.

    Results of fetches that complete after the screen closed are dropped,
    so callers never write into state that has already been discarded.
    """

    def __init__(self, name: str = "screen") -> None:
        self._name = name
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def close(self) -> None:
        self._alive = False

    async def guard(self, awaitable: Awaitable[T]) -> T | None:
        result = await awaitable
        if not self._alive:
            logger.debug("Discarding result for closed %s", self._name)
            return None
        return result
