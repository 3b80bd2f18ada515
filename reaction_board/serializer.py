"""Mutation serializer: one read-modify-write cycle on shared storage at a time."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MutationSerializer:
    """FIFO chain of mutation tasks.

    Each task runs to completion, including its own storage write, before the
    next queued task starts. ``asyncio.Lock`` wakes waiters in arrival order,
    which gives the FIFO guarantee. A failing task releases the chain; its
    exception goes to its own caller only.

    One instance is owned per process and handed to every component that
    mutates the stores.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._waiting = 0

    @property
    def pending(self) -> int:
        """Tasks queued behind the one currently running."""
        return self._waiting

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run(self, task: Callable[[], Awaitable[T]]) -> T:
        """Queue ``task`` and return its result once it has run."""
        self._waiting += 1
        try:
            await self._lock.acquire()
        finally:
            self._waiting -= 1
        try:
            return await task()
        finally:
            self._lock.release()
            logger.debug(f"Mutation finished, {self._waiting} queued")
