"""Boundary object consumed by the HTTP layer.

Wires the stores, the allocator and the submission workflow around a single
``MutationSerializer``. Listing is read-only and does not queue behind
mutations, so it may return a snapshot that is already stale.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from .codes import DEFAULT_MAX_ATTEMPTS, CodeAllocator, RandomSource
from .serializer import MutationSerializer
from .settings import BoardSettings
from .storage import EntryStore, ReservedCodeRegistry
from .submission import Clock, SubmissionWorkflow, utc_now
from .types import Entry, SubmitResult

logger = logging.getLogger(__name__)


class Leaderboard:
    def __init__(
        self,
        entries: EntryStore,
        reserved: ReservedCodeRegistry,
        serializer: Optional[MutationSerializer] = None,
        rng: Optional[RandomSource] = None,
        clock: Clock = utc_now,
        max_allocation_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self.entries = entries
        self.reserved = reserved
        self.serializer = serializer or MutationSerializer()
        self.allocator = CodeAllocator(
            entries,
            reserved,
            self.serializer,
            rng=rng,
            max_attempts=max_allocation_attempts,
        )
        self.workflow = SubmissionWorkflow(
            entries, reserved, self.allocator, self.serializer, clock=clock
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[BoardSettings] = None,
        *,
        on_dropped: Optional[Callable[[int], None]] = None,
        **kwargs: Any,
    ) -> "Leaderboard":
        """Build a leaderboard backed by the files named in ``settings``."""
        settings = settings or BoardSettings()
        logger.debug(f"Leaderboard data in {settings.data_dir}")
        kwargs.setdefault("max_allocation_attempts", settings.max_allocation_attempts)
        return cls(
            EntryStore(settings.entries_path, on_dropped=on_dropped),
            ReservedCodeRegistry(settings.reserved_path),
            **kwargs,
        )

    async def list(self) -> List[Entry]:
        return await asyncio.to_thread(self.entries.list_entries)

    async def submit(
        self, reaction_time: Any, info: Any = None, code: Any = None
    ) -> SubmitResult:
        return await self.workflow.insert_entry(reaction_time, info, code)

    async def reserve_code(self) -> str:
        return await self.allocator.reserve_unique_code()

    async def release_code(self, code: str) -> bool:
        """Drop an outstanding reservation, e.g. from an expiry job."""

        async def _release() -> bool:
            return await asyncio.to_thread(self.reserved.release, code)

        return await self.serializer.run(_release)


__all__ = ["Leaderboard"]
