"""Six-digit code allocation."""
from __future__ import annotations

import asyncio
import logging
import random
from typing import AbstractSet, Protocol

from .errors import AllocationExhausted
from .serializer import MutationSerializer
from .storage import EntryStore, ReservedCodeRegistry
from .validation import CODE_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000
CODE_SPACE = 10**CODE_LENGTH


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


class CodeAllocator:
    """Hands out codes absent from both entry codes and reserved codes."""

    def __init__(
        self,
        entries: EntryStore,
        reserved: ReservedCodeRegistry,
        serializer: MutationSerializer,
        rng: RandomSource | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._entries = entries
        self._reserved = reserved
        self._serializer = serializer
        self._rng = rng if rng is not None else random.SystemRandom()
        self.max_attempts = max_attempts

    def generate_candidate(self) -> str:
        """Uniform random code, zero padded to six digits."""
        return f"{self._rng.randrange(CODE_SPACE):0{CODE_LENGTH}d}"

    def allocate_unique(self, used: AbstractSet[str]) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = self.generate_candidate()
            if code not in used:
                logger.debug(f"Allocated code {code} on attempt {attempt}")
                return code
        logger.warning(
            f"Code space exhausted: {self.max_attempts} attempts "
            f"against {len(used)} used codes"
        )
        raise AllocationExhausted(self.max_attempts)

    async def reserve_unique_code(self) -> str:
        """Allocate a code and record it in the reserved registry."""
        return await self._serializer.run(self._reserve)

    async def _reserve(self) -> str:
        entries = await asyncio.to_thread(self._entries.list_entries)
        reserved = await asyncio.to_thread(self._reserved.list_reserved)
        code = self.allocate_unique({entry.code for entry in entries} | reserved)
        reserved.add(code)
        await asyncio.to_thread(self._reserved.persist_reserved, reserved)
        logger.info(f"Reserved code {code} ({len(reserved)} outstanding)")
        return code


__all__ = ["CODE_SPACE", "DEFAULT_MAX_ATTEMPTS", "CodeAllocator", "RandomSource"]
