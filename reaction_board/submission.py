"""Submission workflow: validate, sanitize, resolve a code and insert an entry.

The whole read-modify-write runs as one task on the mutation serializer:

1. validate the reaction time and sanitize info (no storage touched)
2. load entries and reserved codes
3. resolve the code
   - well-formed provided code held by an entry -> CodeAlreadyUsed
   - well-formed provided code in the registry -> consumed, removal persisted
   - well-formed provided code unknown -> accepted (clients that never reserved)
   - no usable code -> fresh one, avoiding entry and reserved codes,
     registry left untouched
4. append the entry with rank 0 and a fresh timestamp, persist, return it
   together with the re-ranked leaderboard
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Set

from .codes import CodeAllocator
from .errors import CodeAlreadyUsed
from .ranking import format_timestamp
from .serializer import MutationSerializer
from .storage import EntryStore, ReservedCodeRegistry
from .types import Entry, SubmitResult
from .validation import SubmitRequest, validate_submission

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionWorkflow:
    def __init__(
        self,
        entries: EntryStore,
        reserved: ReservedCodeRegistry,
        allocator: CodeAllocator,
        serializer: MutationSerializer,
        clock: Clock = utc_now,
    ) -> None:
        self._entries = entries
        self._reserved = reserved
        self._allocator = allocator
        self._serializer = serializer
        self._clock = clock
        self._last_issued: Optional[datetime] = None

    async def insert_entry(
        self,
        reaction_time: Any,
        info: Any = None,
        code: Any = None,
    ) -> SubmitResult:
        """Insert one result.

        Raises:
            InvalidReactionTime, CodeAlreadyUsed, AllocationExhausted,
            StorageIOError
        """
        request = validate_submission(reaction_time, info, code)
        return await self._serializer.run(lambda: self._insert(request))

    def _next_timestamp(self) -> datetime:
        # Timestamps double as insertion keys, so never hand out the same one twice
        now = self._clock().astimezone(timezone.utc)
        if self._last_issued is not None and now <= self._last_issued:
            now = self._last_issued + timedelta(microseconds=1)
        self._last_issued = now
        return now

    async def _resolve_code(
        self, provided: Optional[str], used: Set[str], reserved: Set[str]
    ) -> str:
        if provided is None:
            return self._allocator.allocate_unique(used | reserved)
        if provided in used:
            logger.warning(f"Rejected submission: code {provided} already used")
            raise CodeAlreadyUsed(provided)
        if provided in reserved:
            reserved.discard(provided)
            await asyncio.to_thread(self._reserved.persist_reserved, reserved)
            logger.debug(f"Consumed reserved code {provided}")
        return provided

    async def _insert(self, request: SubmitRequest) -> SubmitResult:
        entries: List[Entry] = await asyncio.to_thread(self._entries.list_entries)
        reserved = await asyncio.to_thread(self._reserved.list_reserved)
        used = {entry.code for entry in entries}

        code = await self._resolve_code(request.code, used, reserved)
        new_entry = Entry(
            rank=0,
            reaction_time=request.reactionTime,
            timestamp=format_timestamp(self._next_timestamp()),
            code=code,
            info=request.info,
        )
        entries.append(new_entry)
        ranked = await asyncio.to_thread(self._entries.persist_entries, entries)

        inserted = next(
            entry
            for entry in ranked
            if entry.timestamp == new_entry.timestamp and entry.code == code
        )
        logger.info(
            f"Accepted {inserted.reaction_time}ms as rank "
            f"{inserted.rank}/{len(ranked)} (code {code})"
        )
        return SubmitResult(entry=inserted, leaderboard=tuple(ranked))


__all__ = ["Clock", "SubmissionWorkflow", "utc_now"]
